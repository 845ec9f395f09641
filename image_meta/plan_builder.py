"""Plan builder - computes all run metadata from configuration and context."""

import logging
from datetime import datetime

from .environment import EnvironmentConfig
from .flavor import apply_flavor, parse_flavor
from .images import transform_images
from .metadata import (
    get_bake_definition,
    get_json,
    get_label_map,
    get_labels,
    get_tags,
)
from .models import Context, MetadataPlan, RepoInfo
from .tag_rules import transform_tags
from .version_resolver import resolve

logger = logging.getLogger(__name__)


def prepare_plan(
    config: EnvironmentConfig,
    context: Context,
    repo_info: RepoInfo,
    now: datetime,
) -> MetadataPlan:
    """
    Prepare the metadata plan.

    This function runs the whole pipeline: parse rules, resolve the
    version, apply the flavor and assemble tags, labels and their
    projections. It doesn't write anything.

    Args:
        config: Environment configuration
        context: The triggering event
        repo_info: Repository metadata
        now: Run timestamp used for the created label

    Returns:
        MetadataPlan ready for execution

    Raises:
        DirectiveError: If a tag, flavor or image directive is invalid
    """
    tags = transform_tags(config.tags)
    flavor = parse_flavor(config.flavor)
    images = transform_images(config.images)

    version = apply_flavor(resolve(tags, context), flavor)
    if version.main is None:
        logger.warning("No Docker image version has been generated. Check tags input.")
    else:
        logger.info(f"Version: {version.main}")

    image_tags = get_tags(version, images)
    label_map = get_label_map(version, context, repo_info, flavor, config.labels, now)

    plan = MetadataPlan(
        version=version,
        tags=image_tags,
        labels=get_labels(label_map),
        json_output=get_json(image_tags, label_map),
        bake_definition=get_bake_definition(config.bake_target, image_tags, label_map, images, version),
        sep_tags=config.sep_tags,
        sep_labels=config.sep_labels,
        output_dir=config.output_dir,
        github_output=config.github_output,
        github_env=config.github_env,
        export_env=config.export_env,
    )
    if images and not plan.has_tags():
        logger.warning("No Docker tag has been generated. Check tags input.")
    return plan

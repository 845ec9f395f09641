"""Plan executor - writes the outputs of a prepared plan."""

import os
from .config import BAKE_FILE_NAME, ENV_OUTPUT_PREFIX, JSON_FILE_NAME
from .models import MetadataPlan, ExecutionResult
from .io_layer import IOLayer


def execute_plan(plan: MetadataPlan, io_layer: IOLayer) -> ExecutionResult:
    """
    Execute a prepared plan.

    Writes the JSON and bake files, then every step output to GITHUB_OUTPUT
    and, when enabled, to GITHUB_ENV. Without GITHUB_OUTPUT the outputs are
    printed.
    """
    result = ExecutionResult(success=True, dry_run=io_layer.dry_run)

    try:
        bake_file = _write_files(plan, io_layer, result)

        outputs = plan.get_outputs()
        outputs["bake-file"] = bake_file
        _write_outputs(plan, outputs, io_layer, result)

    except OSError as e:
        result.success = False
        result.errors.append(f"Execution failed: {str(e)}")

    return result


def _write_files(plan: MetadataPlan, io_layer: IOLayer, result: ExecutionResult) -> str:
    """Write metadata.json and the bake file, returning the bake file path."""
    json_file = os.path.join(plan.output_dir, JSON_FILE_NAME)
    if io_layer.write_json(json_file, plan.json_output):
        result.files_written.append(json_file)

    bake_file = os.path.join(plan.output_dir, BAKE_FILE_NAME)
    if io_layer.write_json(bake_file, plan.bake_definition):
        result.files_written.append(bake_file)

    return bake_file


def _write_outputs(plan: MetadataPlan, outputs, io_layer: IOLayer, result: ExecutionResult):
    """Set step outputs and mirror them to the environment."""
    for name, value in outputs.items():
        if plan.github_output:
            if io_layer.append_variable(plan.github_output, name, value):
                result.outputs_written.append(name)
        elif not io_layer.dry_run:
            print(f"{name}:")
            print(value)

        if plan.export_env and plan.github_env:
            env_name = f"{ENV_OUTPUT_PREFIX}{name.upper().replace('-', '_')}"
            io_layer.append_variable(plan.github_env, env_name, value)

"""solang.toml project checks."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .constants import PROJECT_MANIFEST
from .errors import FileError, SchemaParseError

logger = logging.getLogger(__name__)


def _load_toml_text(text: str) -> Dict[str, Any]:
    try:
        import tomllib  # Python 3.11+
    except ImportError:  # pragma: no cover
        import tomli as tomllib  # type: ignore
    return tomllib.loads(text)


def check_target_match(
    target_name: str,
    config_file_content: Optional[str] = None,
    project_dir: str | Path | None = None,
) -> bool:
    """Return False when solang.toml names a different target than ``target_name``.

    Without explicit content the manifest is read from ``project_dir`` (the
    working directory by default); a missing manifest always matches.
    """
    if config_file_content is None:
        manifest_path = Path(project_dir or ".") / PROJECT_MANIFEST
        if not manifest_path.exists():
            return True
        try:
            config_file_content = manifest_path.read_text()
        except OSError as exc:
            raise FileError(str(manifest_path), exc) from exc
        source = str(manifest_path)
    else:
        source = PROJECT_MANIFEST

    try:
        parsed = _load_toml_text(config_file_content)
    except ValueError as exc:
        raise SchemaParseError(source, exc) from exc
    target = parsed.get("target")
    config_target = target.get("name") if isinstance(target, dict) else None
    if not isinstance(config_target, str):
        raise SchemaParseError(source, "failed to get target name")

    if config_target != target_name:
        logger.debug("target mismatch: %s != %s", config_target, target_name)
        print(
            f"Error: The specified target '{target_name}' does not match the target "
            f"'{config_target}' in {PROJECT_MANIFEST}"
        )
        return False
    return True

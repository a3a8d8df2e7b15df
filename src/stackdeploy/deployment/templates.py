"""
Template loading.
"""

from pathlib import Path
from typing import Union

from ..errors import TemplateLoadError


def load_template(template_path: Union[str, Path]) -> str:
    """Load a CloudFormation template as string.

    The body is passed to CloudFormation untouched, YAML or JSON alike.

    Raises:
        TemplateLoadError: If the file cannot be read
    """
    path = Path(template_path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateLoadError(str(path), str(e)) from e

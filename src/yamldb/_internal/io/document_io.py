"""Read a database file into a composed YAML node tree (internal)."""

from pathlib import Path
from typing import Optional, Union

import yaml

from yamldb.codes import FaultKind
from yamldb.contracts import LoadFault
from yamldb.kernel.node import Node


class DocumentReadError(ValueError):
    """Raised when a database file cannot be read or parsed."""

    def __init__(self, fault: LoadFault):
        super().__init__(fault.message)
        self.fault = fault


def compose_file(path: Union[str, Path]) -> Optional[Node]:
    """Compose the single YAML document in ``path``.

    Returns None for an empty file. The file handle is closed before
    returning on every path.
    """
    path_str = str(path)
    try:
        with open(path_str, "r", encoding="utf-8") as handle:
            composed = yaml.compose(handle, Loader=yaml.SafeLoader)
    except OSError as e:
        raise DocumentReadError(
            LoadFault(kind=FaultKind.IO_ERROR, message=e.strerror or str(e), path=path_str)
        ) from e
    except UnicodeDecodeError as e:
        raise DocumentReadError(
            LoadFault(kind=FaultKind.IO_ERROR, message=f"File is not valid UTF-8: {e.reason}", path=path_str)
        ) from e
    except yaml.MarkedYAMLError as e:
        mark = e.problem_mark or e.context_mark
        raise DocumentReadError(
            LoadFault(
                kind=FaultKind.SYNTAX_ERROR,
                message=e.problem or e.context or str(e),
                path=path_str,
                line=mark.line + 1 if mark is not None else None,
                column=mark.column + 1 if mark is not None else None,
            )
        ) from e
    except yaml.YAMLError as e:
        raise DocumentReadError(
            LoadFault(kind=FaultKind.SYNTAX_ERROR, message=str(e), path=path_str)
        ) from e

    if composed is None:
        return None
    return Node(composed)

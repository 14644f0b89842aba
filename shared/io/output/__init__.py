"""출력 경로 관리

Usage:
    from shared.io.output import OutputPath, create_output_path

    output_path = create_output_path("contoso.json", "audit", "full")
"""

from .builder import OutputPath, safe_name
from .helpers import create_output_path, snapshot_identifier

__all__: list[str] = [
    "OutputPath",
    "safe_name",
    "create_output_path",
    "snapshot_identifier",
]

"""
Response helpers shared by routers.
"""

from fastapi import Response

from hourbook.application.dto.billing_dto import CsvExportDTO


def csv_response(export: CsvExportDTO) -> Response:
    """CSV download with the export's file name."""
    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'}
    )

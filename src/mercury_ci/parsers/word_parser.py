"""Word document (.docx) text extraction."""

import io
from zipfile import BadZipFile

from docx import Document
from docx.opc.exceptions import PackageNotFoundError

from ..exceptions import ExtractionError


class WordTextParser:
    """
    Extracts plain text from .docx bytes.

    Paragraph text comes first, followed by table cells row by row so
    that invoice line items laid out in tables are still scanned.
    """

    def parse(self, data: bytes, file_name: str = "") -> str:
        """
        Extract text from a Word document.

        Raises:
            ExtractionError: If the document is corrupted or not a .docx file.
        """
        try:
            doc = Document(io.BytesIO(data))
        except (BadZipFile, PackageNotFoundError) as e:
            raise ExtractionError(
                message="Document is corrupted or not a valid Word file",
                file_name=file_name,
                details={"original_error": str(e)},
            )
        except Exception as e:
            raise ExtractionError(
                message=f"Failed to open document: {str(e)}",
                file_name=file_name,
                details={"original_error": str(e)},
            )

        parts = [para.text for para in doc.paragraphs if para.text.strip()]
        for table in doc.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    parts.append(" | ".join(cells))
        return "\n".join(parts)

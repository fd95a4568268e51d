"""QR image and PDF rendering for tickets.

Files live in a single directory and are addressed by names derived from
the ticket code (``qr-<code>.png``, ``ticket-<code>.pdf``). Every file is
rendered into a temporary sibling and moved into place only once fully
written, so a referenced file is never half-written.
"""

import logging
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import qrcode
from django.utils import timezone
from qrcode.constants import ERROR_CORRECT_M
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from ticketing.domain import Attendee, Event, TicketArtifacts, TicketCode
from ticketing.domain.errors import ArtifactGenerationError

logger = logging.getLogger(__name__)

QR_BOX_SIZE = 8
QR_BORDER = 1
QR_PDF_SIZE = 55 * mm


@contextmanager
def _atomic_target(target: Path) -> Iterator[Path]:
    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=".", suffix=".tmp")
    os.close(fd)
    tmp_path = Path(tmp_name)
    try:
        yield tmp_path
        os.replace(tmp_path, target)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


class TicketArtifactGenerator:
    """Writes the QR image and PDF document for a ticket code."""

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, filename: str) -> Path:
        return self._directory / filename

    def generate(self, code: TicketCode, event: Event, attendee: Attendee) -> TicketArtifacts:
        """Render both artifacts for one ticket, QR first.

        Raises:
            ArtifactGenerationError: If either file cannot be produced. Any
                file already written for this code is removed.
        """
        try:
            qr_file = self.generate_qr(code)
            pdf_file = self.generate_pdf(code, event, attendee)
        except ArtifactGenerationError:
            self.discard(code)
            raise
        return TicketArtifacts(qr_file=qr_file, pdf_file=pdf_file)

    def generate_qr(self, code: TicketCode) -> str:
        """Encode the ticket code into a PNG. Same code, same image."""
        target = self.path_for(code.qr_filename)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            qr = qrcode.QRCode(
                version=None,
                error_correction=ERROR_CORRECT_M,
                box_size=QR_BOX_SIZE,
                border=QR_BORDER,
            )
            qr.add_data(code.value)
            qr.make(fit=True)
            image = qr.make_image(fill_color="black", back_color="white")
            with _atomic_target(target) as tmp_path:
                image.save(str(tmp_path), format="PNG")
        except Exception as exc:
            logger.error("Failed to generate QR code for ticket %s: %s", code, exc)
            raise ArtifactGenerationError("QR code generation failed") from exc
        logger.debug("Generated QR code for ticket %s", code)
        return code.qr_filename

    def generate_pdf(self, code: TicketCode, event: Event, attendee: Attendee) -> str:
        """Render the printable ticket, embedding the QR image.

        Raises:
            ArtifactGenerationError: If the QR image is missing or the PDF
                cannot be written.
        """
        qr_path = self.path_for(code.qr_filename)
        if not qr_path.is_file():
            logger.error("QR image %s missing for ticket %s", qr_path.name, code)
            raise ArtifactGenerationError("QR image missing for ticket PDF")

        target = self.path_for(code.pdf_filename)
        starts_at = timezone.localtime(event.starts_at)
        try:
            with _atomic_target(target) as tmp_path:
                pdf = canvas.Canvas(str(tmp_path), pagesize=A4)
                pdf.setTitle(f"Ticket {code}")
                width, height = A4
                y = height - 30 * mm

                pdf.setFont("Helvetica-Bold", 20)
                pdf.drawCentredString(width / 2, y, "Event Ticket")
                y -= 15 * mm

                pdf.setFont("Helvetica", 13)
                for line in (
                    f"Event: {event.title}",
                    f"Date: {starts_at:%A, %d %B %Y}",
                    f"Time: {starts_at:%H:%M %Z}",
                    f"Location: {event.location or '-'}",
                    "",
                    f"Ticket Code: {code}",
                    f"Attendee: {attendee.display_name}",
                ):
                    pdf.drawString(25 * mm, y, line)
                    y -= 8 * mm

                pdf.drawImage(
                    str(qr_path),
                    (width - QR_PDF_SIZE) / 2,
                    y - QR_PDF_SIZE - 5 * mm,
                    width=QR_PDF_SIZE,
                    height=QR_PDF_SIZE,
                )
                pdf.showPage()
                pdf.save()
        except Exception as exc:
            logger.error("Failed to generate PDF for ticket %s: %s", code, exc)
            raise ArtifactGenerationError("Ticket PDF generation failed") from exc
        logger.debug("Generated PDF for ticket %s", code)
        return code.pdf_filename

    def discard(self, code: TicketCode) -> None:
        """Remove whatever files exist for a ticket code."""
        for filename in (code.qr_filename, code.pdf_filename):
            try:
                self.path_for(filename).unlink(missing_ok=True)
            except OSError:
                logger.warning("Could not remove artifact %s", filename)

"""QR verification code rendering.

The certificate ID is encoded verbatim so a scanner reads back exactly the
value stored on the student record.
"""

import io

import qrcode
from PIL import Image
from qrcode.constants import ERROR_CORRECT_M
from qrcode.exceptions import DataOverflowError

from certengine.errors import VerificationEncodingError

QR_SIZE_PX = 120
QR_BORDER_MODULES = 1

_BLACK = 0
_WHITE = 255


class VerificationEncoder:
    """Encodes certificate IDs as square two-tone PNG QR codes."""

    def __init__(self, size: int = QR_SIZE_PX, border: int = QR_BORDER_MODULES):
        self.size = size
        self.border = border

    def encode(self, certificate_id: str) -> bytes:
        """Render ``certificate_id`` as a ``size`` x ``size`` PNG.

        Raises:
            VerificationEncodingError: If the ID is empty, exceeds QR capacity,
                or needs more modules than there are pixels to draw them.
        """
        if not certificate_id:
            raise VerificationEncodingError("Certificate ID is empty")

        qr = qrcode.QRCode(
            version=None,
            error_correction=ERROR_CORRECT_M,
            box_size=1,
            border=self.border,
        )
        qr.add_data(certificate_id)
        try:
            qr.make(fit=True)
        except (DataOverflowError, ValueError) as e:
            raise VerificationEncodingError(
                f"Certificate ID too long for a QR code ({len(certificate_id)} chars)"
            ) from e

        # get_matrix() includes the quiet zone
        matrix = qr.get_matrix()
        modules = len(matrix)
        if modules > self.size:
            raise VerificationEncodingError(
                f"QR code needs {modules} modules but only {self.size}px are available"
            )

        grid = Image.new("L", (modules, modules), _WHITE)
        grid.putdata([_BLACK if dark else _WHITE for row in matrix for dark in row])
        image = grid.resize((self.size, self.size), Image.Resampling.NEAREST)

        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()

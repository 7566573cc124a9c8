"""
Document setup for PDF reports
Creates blank A4 documents with the embedded Thai font and the school logo
"""

import base64
import hashlib
import os
import threading
from io import BytesIO

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import SimpleDocTemplate

from utils.logger import get_logger

logger = get_logger(__name__)

FONT_FAMILY = 'Sarabun'
FALLBACK_FONT = 'Helvetica'
FALLBACK_BOLD_FONT = 'Helvetica-Bold'
# Shorter base64 payloads cannot be a real font program
MIN_FONT_PAYLOAD_LENGTH = 100
IMAGE_DATA_PREFIX = 'data:image'

# Thai-capable TrueType fonts installed by common OS packages
# (fonts-tlwg-*-ttf, fonts-noto-core, google-noto-sans-thai-fonts, Windows)
SYSTEM_THAI_FONTS = (
    '/usr/share/fonts/truetype/tlwg/Sarabun.ttf',
    '/usr/share/fonts/truetype/noto/NotoSansThai-Regular.ttf',
    '/usr/share/fonts/google-noto/NotoSansThai-Regular.ttf',
    '/usr/share/fonts/noto/NotoSansThai-Regular.ttf',
    '/usr/share/fonts/truetype/tlwg/Garuda.ttf',
    '/usr/share/fonts/truetype/tlwg/Loma.ttf',
    'C:\\Windows\\Fonts\\tahoma.ttf',
)

PAGE_SIZE = A4
PAGE_MARGIN = 14 * mm
# Logo box measured from the top-left corner of the first page
LOGO_X = 175 * mm
LOGO_TOP = 15 * mm
LOGO_WIDTH = 20 * mm
LOGO_HEIGHT = 20 * mm

_font_lock = threading.Lock()
_registered_fonts = {}

class ReportAssets:
    """Embedded static resources for PDF reports.

    font_data is a base64-encoded TrueType program, logo_data a
    ``data:image/...;base64,`` URI. Either may be None.
    """

    def __init__(self, font_data=None, logo_data=None):
        self.font_data = font_data
        self.logo_data = logo_data

    @classmethod
    def from_files(cls, font_path=None, logo_path=None):
        """Read the assets from disk, leaving missing files as None"""
        font_data = None
        logo_data = None
        if font_path:
            try:
                with open(font_path, 'rb') as f:
                    font_data = base64.b64encode(f.read()).decode('ascii')
            except OSError as e:
                logger.warning("Report font not loaded from %s: %s", font_path, e)
        if logo_path:
            try:
                with open(logo_path, 'rb') as f:
                    encoded = base64.b64encode(f.read()).decode('ascii')
                logo_data = f'{IMAGE_DATA_PREFIX}/png;base64,{encoded}'
            except OSError as e:
                logger.warning("Report logo not loaded from %s: %s", logo_path, e)
        return cls(font_data=font_data, logo_data=logo_data)

    @classmethod
    def discover(cls, font_path=None, logo_path=None, font_fallbacks=SYSTEM_THAI_FONTS):
        """Like from_files, trying ``font_fallbacks`` when ``font_path`` is missing"""
        resolved = find_font_file([font_path, *font_fallbacks])
        if resolved is None:
            logger.warning("No Thai-capable report font found, Thai text will not render")
        elif resolved != font_path:
            logger.info("Report font %s not found, using %s", font_path, resolved)
        return cls.from_files(font_path=resolved, logo_path=logo_path)

    def __repr__(self):
        return (f'<ReportAssets font={len(self.font_data or "")} chars '
                f'logo={len(self.logo_data or "")} chars>')

def find_font_file(paths):
    """First existing file among ``paths``, or None"""
    for path in paths:
        if path and os.path.isfile(path):
            return path
    return None

def _register_font(font_data):
    """Register the embedded font once per payload and return its name.

    Returns None when the payload is missing, too short or unreadable.
    """
    if not font_data or len(font_data) < MIN_FONT_PAYLOAD_LENGTH:
        return None

    if isinstance(font_data, str):
        font_data = font_data.encode('ascii', 'ignore')
    digest = hashlib.sha1(font_data).hexdigest()

    with _font_lock:
        if digest in _registered_fonts:
            return _registered_fonts[digest]
        try:
            raw = base64.b64decode(b''.join(font_data.split()), validate=True)
            font_name = f'{FONT_FAMILY}-{digest[:8]}'
            pdfmetrics.registerFont(TTFont(font_name, BytesIO(raw)))
        except Exception as e:
            logger.warning("Embedded report font rejected, using %s: %s", FALLBACK_FONT, e)
            return None
        _registered_fonts[digest] = font_name
        logger.info("Registered report font %s", font_name)
        return font_name

def _load_logo(logo_data):
    """Decode the logo data URI into an ImageReader, or None"""
    if not isinstance(logo_data, str) or not logo_data.startswith(IMAGE_DATA_PREFIX):
        return None
    try:
        _, _, encoded = logo_data.partition(',')
        reader = ImageReader(BytesIO(base64.b64decode(encoded)))
        reader.getSize()
        return reader
    except Exception as e:
        logger.warning("Report logo could not be decoded, skipping it: %s", e)
        return None

class ReportDocument:
    """An A4 document being assembled in memory for a single report."""

    def __init__(self, font_name, bold_font_name, logo=None, title=''):
        self.font_name = font_name
        self.bold_font_name = bold_font_name
        self.logo = logo
        self.page_count = 0
        self._buffer = BytesIO()
        self.template = SimpleDocTemplate(
            self._buffer,
            pagesize=PAGE_SIZE,
            leftMargin=PAGE_MARGIN,
            rightMargin=PAGE_MARGIN,
            topMargin=PAGE_MARGIN,
            bottomMargin=PAGE_MARGIN,
            title=title,
        )

    @property
    def has_embedded_font(self):
        return self.font_name != FALLBACK_FONT

    @property
    def has_logo(self):
        return self.logo is not None

    @property
    def available_width(self):
        return self.template.width

    def _draw_first_page(self, canvas, doc):
        if self.logo is None:
            return
        page_height = doc.pagesize[1]
        canvas.saveState()
        canvas.drawImage(
            self.logo,
            LOGO_X,
            page_height - LOGO_TOP - LOGO_HEIGHT,
            width=LOGO_WIDTH,
            height=LOGO_HEIGHT,
            mask='auto',
        )
        canvas.restoreState()

    def build(self, story):
        """Render the flowables and return the finished PDF bytes."""
        self.template.build(story, onFirstPage=self._draw_first_page)
        self.page_count = self.template.page
        pdf_bytes = self._buffer.getvalue()
        self._buffer.close()
        return pdf_bytes

class DocumentSetup:
    """Factory for ReportDocuments sharing one set of embedded assets.

    Never raises: a bad font falls back to Helvetica and a bad logo is
    simply not drawn.
    """

    def __init__(self, assets=None):
        self.assets = assets or ReportAssets()
        self.font_name = _register_font(self.assets.font_data)
        self.logo = _load_logo(self.assets.logo_data)

    @classmethod
    def from_config(cls, config):
        return cls(ReportAssets(
            font_data=config.get('REPORT_FONT_BASE64'),
            logo_data=config.get('REPORT_LOGO_DATA_URI'),
        ))

    def create(self, title=''):
        if self.font_name:
            # The embedded font has no bold face; headers use the same font
            return ReportDocument(self.font_name, self.font_name, self.logo, title)
        return ReportDocument(FALLBACK_FONT, FALLBACK_BOLD_FONT, self.logo, title)

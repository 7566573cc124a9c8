"""
File sinks: where finished export payloads are delivered
"""

from io import BytesIO
from pathlib import Path

from flask import send_file

from utils.logger import get_logger

logger = get_logger(__name__)

class FileSink:
    """Deliver a finished ExportPayload to the user as a file."""

    def accept(self, payload):
        raise NotImplementedError

class MemoryFileSink(FileSink):
    """Keeps every payload it receives, in order"""

    def __init__(self):
        self.payloads = []

    def accept(self, payload):
        self.payloads.append(payload)

    @property
    def last(self):
        return self.payloads[-1] if self.payloads else None

class FlaskDownloadSink(FileSink):
    """Turns the payload into an attachment response for the current request"""

    def __init__(self):
        self.response = None

    def accept(self, payload):
        # send_file encodes non-ASCII download names (RFC 6266 filename*)
        self.response = send_file(
            BytesIO(payload.content),
            mimetype=payload.content_type,
            as_attachment=True,
            download_name=payload.filename,
            max_age=0,
        )
        # Werkzeug would append a second charset to text/* types
        self.response.headers['Content-Type'] = payload.content_type
        logger.info("Sending %s (%d bytes)", payload.filename, payload.size)

class FileSystemSink(FileSink):
    """Writes payloads into a directory, used by the command line exporter"""

    def __init__(self, directory):
        self.directory = Path(directory)
        self.written = []

    def accept(self, payload):
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / payload.filename
        path.write_bytes(payload.content)
        self.written.append(path)
        logger.info("Wrote %s (%d bytes)", path, payload.size)

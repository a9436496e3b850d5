"""
Cold Call Recording Service.

Entry point for the recording download and transcription service.
"""

import uvicorn
from ddtrace import patch_all

from call_recordings.app import create_app

patch_all()

app = create_app()


def main():
    """Starts the HTTP server."""
    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()

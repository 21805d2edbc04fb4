"""
=============================================================================
FILESERVER - Minimal HTTP/1.1 File-and-Directory Server
=============================================================================

Serves, stores and deletes files below a document root over plain HTTP,
one request per TCP connection, built on raw Python sockets.

    ┌─────────────────────────────────────────────────────────────────────┐
    │   GET    /path   read a file (directories serve index.html)        │
    │   HEAD   /path   same headers as GET, no body                      │
    │   POST   /path   write the body to the file (201 Created)          │
    │   PUT    /path   write the body to the file (200 OK)               │
    │   DELETE /path   remove the file (204 No Content)                  │
    │   anything else  405 Method Not Allowed                            │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    fileserver/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m fileserver)
    ├── server.py            # FileServer and ConnectionHandler
    ├── config.py            # ServerConfig dataclass
    ├── core/
    │   ├── socket_server.py # Listening socket and accept loop
    │   ├── connection.py    # Client socket wrapper
    │   ├── thread_pool.py   # Worker threads
    │   └── file_store.py    # Document root access, write lock
    ├── http/
    │   ├── request.py       # Request parsing
    │   ├── response.py      # Response rendering
    │   ├── status_codes.py  # The five emitted status codes
    │   └── mime_types.py    # Extension → Content-Type
    ├── handlers/
    │   └── generator.py     # Method dispatch
    └── middleware/
        ├── base.py          # Middleware pipeline
        └── logging.py       # Access log

=============================================================================
QUICK START
=============================================================================

    from fileserver import FileServer, ServerConfig

    server = FileServer(ServerConfig(port=8080, document_root="./www"))
    server.run()

    $ curl -X PUT --data-binary @notes.txt http://127.0.0.1:8080/notes.txt
    $ curl http://127.0.0.1:8080/notes.txt

=============================================================================
"""

__version__ = "1.0.0"

from .server import FileServer, ConnectionHandler
from .config import ServerConfig

__all__ = ["FileServer", "ConnectionHandler", "ServerConfig", "__version__"]

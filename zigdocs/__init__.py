"""zigdocs - Zig standard library and builtin documentation for AI coding assistants.

Usage:
    python -m zigdocs              # stdio (default)
    python -m zigdocs -t http      # HTTP on port 8000

As a library:
    from zigdocs.session import load_session
    from zigdocs.settings import zigdocs_settings
    from zigdocs.unified import create_server

    session = await load_session(zigdocs_settings)
    create_server(session).run()
"""

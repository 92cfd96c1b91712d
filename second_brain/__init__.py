"""
Second Brain.

- backend/: Graph API service (FastAPI), graph store, search synchronizer
- client/: Client graph state mirroring the server graph over HTTP
"""

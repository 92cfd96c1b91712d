"""
Client Graph State Module.

In-memory mirror of the note graph for an interactive view. Talks to the
backend only through the Graph API over HTTP (httpx) and sends
X-Frontend-ID: client for log routing.
"""

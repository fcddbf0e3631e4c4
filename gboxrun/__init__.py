"""gboxrun - drive an Android app's run lifecycle from AI agents.

Two front ends share one app-controller backend:

- ``gboxrun.rpc``: a minimal HTTP/1.1 control plane on localhost:8765
- ``gboxrun.mcp``: a JSON-RPC 2.0 (MCP) server over stdin/stdout
"""

__version__ = "1.0.0"

"""RPC wrapper exposing the committee's start/request steps over HTTP."""

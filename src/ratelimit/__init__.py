"""Rate limiting.

Admission control for AI endpoints

Every call to an AI provider costs money and takes time. Rate limiting bounds
the number of requests one caller can issue in a time window, so a single
user (or a runaway client) can not run up provider costs or starve other users.

Callers are identified by authenticated user ID when available, otherwise by
network address. Requests are counted in fixed windows: the window a request
belongs to starts at `floor(now / window) * window`. When the number of
requests in the current window exceeds the configured ceiling, the request is
rejected with `RateLimitExceeded` before it reaches the orchestrator.

Two independent policies are configured:
- `default` for ordinary AI calls (100 requests per 15 minutes by default)
- `expensive` for multimodal and image analysis (10 requests per hour)

Counters can live in process memory (single worker deployments) or in
SQLite/PostgreSQL shared by all workers.
"""

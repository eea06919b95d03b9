"""DevPulse: repository health analytics for small software teams.

Modules:
  - heuristics: module classifier, commit honesty, role inference
  - models / validation: snapshot and derived records
  - lifecycle: pull request and branch state at an instant
  - metrics: live delivery/integration/stability risk, health, trend
  - derive: derived entities built in one pass per sync
  - simulation: scenario projection onto live health
  - store: in-memory snapshot store
  - sync: GitHub client and payload transformation
  - advisor / llm: project advisor with optional LLM backend
  - api: FastAPI application
  - cli: command line entry point
"""

__version__ = "0.1.0"

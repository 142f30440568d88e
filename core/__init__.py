"""
Core - Shared infrastructure for Bidmarket apps.

- Abstract timestamped base model
- Upload validation for deliverable files
- Blob storage helper for deliverables
"""

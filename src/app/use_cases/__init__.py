"""
Use Cases

Organized into domain folders:
- deployment/: Provisioning requests and job tracking
- admin/: Operator tenant lifecycle (redeploy, deactivate, domain webhooks)

Import from subdirectories.
"""

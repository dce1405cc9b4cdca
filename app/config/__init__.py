# =============================================================================
# Django Project Configuration Package
# =============================================================================
# Settings for the host Django project that installs the billing app.
# =============================================================================

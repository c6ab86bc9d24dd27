"""
Domain layer for the COVER-Magento2 status sync.

This layer contains the status-update value object and the per-request
pipeline state.
"""

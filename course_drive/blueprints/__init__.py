from .drive import drive_bp
from .admin import admin_bp

__all__ = ['drive_bp', 'admin_bp']

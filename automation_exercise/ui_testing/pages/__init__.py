"""
================================================================================
Page Objects
================================================================================

Page Object Model implementations for automationexercise.com.

Author: Automation Team
License: MIT
================================================================================
"""

from .contact_page import ContactUsPage
from .home_page import HomePage
from .login_page import LoginPage

__all__ = [
    "ContactUsPage",
    "HomePage",
    "LoginPage",
]

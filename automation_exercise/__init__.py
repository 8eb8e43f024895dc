"""
Automation Exercise UI test framework.

Browser session lifecycle, condition polling and page objects for
https://automationexercise.com, built on Playwright.
"""

__version__ = "1.0.0"

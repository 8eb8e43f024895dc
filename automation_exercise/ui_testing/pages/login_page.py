"""
================================================================================
Login Page Object
================================================================================

Signup / Login page of automationexercise.com.

NOTE:
  Credentials default to the AE_USER_EMAIL / AE_USER_PASSWORD environment
  variables so nothing secret lives in the repository.

================================================================================
"""

from __future__ import annotations

import os
from typing import Optional

import allure

from automation_exercise.ui_testing.framework.page_base import BasePage


class LoginPage(BasePage):
    """Login / signup page object."""

    URL_PATH = "/login"
    PAGE_TITLE = "Automation Exercise - Signup / Login"

    LOGIN_HEADER = ".login-form h2"
    EMAIL_INPUT = "input[data-qa='login-email']"
    PASSWORD_INPUT = "input[data-qa='login-password']"
    LOGIN_BUTTON = "button[data-qa='login-button']"
    LOGIN_ERROR = ".login-form form p"

    SIGNUP_HEADER = ".signup-form h2"
    SIGNUP_FORM = ".signup-form form"
    SIGNUP_NAME_INPUT = "input[data-qa='signup-name']"
    SIGNUP_EMAIL_INPUT = "input[data-qa='signup-email']"
    SIGNUP_BUTTON = "button[data-qa='signup-button']"

    @allure.step("Open login page")
    def open(self) -> "LoginPage":
        self.navigate()
        self.wait.until_visible(self.LOGIN_HEADER)
        return self

    def is_form_displayed(self) -> bool:
        return all(
            self.is_element_displayed(locator)
            for locator in (self.EMAIL_INPUT, self.PASSWORD_INPUT, self.LOGIN_BUTTON)
        )

    @allure.step("Login (email={email})")
    def login(
        self,
        email: Optional[str] = None,
        password: Optional[str] = None,
    ) -> None:
        """
        Submit the login form.

        Args:
            email: Defaults to the AE_USER_EMAIL env var
            password: Defaults to the AE_USER_PASSWORD env var
        """
        if email is None:
            email = os.getenv("AE_USER_EMAIL", "demo_user@example.com")
        if password is None:
            password = os.getenv("AE_USER_PASSWORD", "demo_password")

        self.type(self.EMAIL_INPUT, email)
        self.type(self.PASSWORD_INPUT, password)
        self.click(self.LOGIN_BUTTON)

    def login_error(self, timeout: Optional[float] = None) -> str:
        """Text of the login error message once it appears."""
        self.wait.until_text_present(self.LOGIN_ERROR, "incorrect", timeout=timeout)
        return self.get_text(self.LOGIN_ERROR)

    @allure.step("Start signup (name={name})")
    def start_signup(self, name: str, email: str) -> None:
        self.type(self.SIGNUP_NAME_INPUT, name)
        self.type(self.SIGNUP_EMAIL_INPUT, email)
        self.click(self.SIGNUP_BUTTON)

"""
================================================================================
Contact Us Page Object
================================================================================

Contact form of automationexercise.com. Submitting the form opens a
"Press OK to proceed!" confirm dialog.

================================================================================
"""

from __future__ import annotations

from typing import Optional

import allure

from automation_exercise.ui_testing.framework.page_base import BasePage


class ContactUsPage(BasePage):
    """Contact us page object."""

    URL_PATH = "/contact_us"
    PAGE_TITLE = "Automation Exercise - Contact Us"

    FORM_HEADER = ".contact-form h2"
    NAME_INPUT = "input[data-qa='name']"
    EMAIL_INPUT = "input[data-qa='email']"
    SUBJECT_INPUT = "input[data-qa='subject']"
    MESSAGE_INPUT = "textarea[data-qa='message']"
    SUBMIT_BUTTON = "input[data-qa='submit-button']"
    SUCCESS_MESSAGE = ".contact-form .status.alert-success"

    CONFIRM_TEXT = "Press OK to proceed!"

    @allure.step("Open contact us page")
    def open(self) -> "ContactUsPage":
        self.navigate()
        self.wait.until_visible(self.FORM_HEADER)
        return self

    def fill_form(self, name: str, email: str, subject: str, message: str) -> None:
        self.type(self.NAME_INPUT, name)
        self.type(self.EMAIL_INPUT, email)
        self.type(self.SUBJECT_INPUT, subject)
        self.type(self.MESSAGE_INPUT, message)

    @allure.step("Submit contact form (confirm={confirm})")
    def submit(self, confirm: bool = True) -> None:
        """Click submit, answering the confirm dialog with OK or Cancel."""
        self.driver.expect_alert(accept=confirm)
        self.click(self.SUBMIT_BUTTON)

    def success_message(self, timeout: Optional[float] = None) -> str:
        self.wait.until_text_present(self.SUCCESS_MESSAGE, "success", timeout=timeout)
        return self.get_text(self.SUCCESS_MESSAGE)

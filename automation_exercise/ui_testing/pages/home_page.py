"""
================================================================================
Home Page Object
================================================================================

Landing page of automationexercise.com.

================================================================================
"""

from __future__ import annotations

import allure

from automation_exercise.ui_testing.framework.page_base import BasePage


class HomePage(BasePage):
    """Home page object."""

    URL_PATH = "/"
    PAGE_TITLE = "Automation Exercise"

    LOGO = "img[alt='Website for automation practice']"
    SIGNUP_LOGIN_LINK = "a[href='/login']"
    PRODUCTS_LINK = "a[href='/products']"
    CART_LINK = "ul.navbar-nav a[href='/view_cart']"
    LOGGED_IN_AS = "ul.navbar-nav a:has-text('Logged in as')"
    LOGOUT_LINK = "a[href='/logout']"

    @allure.step("Open home page")
    def open(self) -> "HomePage":
        self.navigate()
        self.wait.until_visible(self.LOGO)
        return self

    def is_loaded(self) -> bool:
        """Logo visible and title as expected."""
        return (
            self.is_element_displayed(self.LOGO)
            and self.PAGE_TITLE.lower() in self.get_title().lower()
        )

    @allure.step("Go to Signup / Login")
    def go_to_login(self) -> None:
        self.click(self.SIGNUP_LOGIN_LINK)
        self.wait.until_url_contains("/login")

    @allure.step("Go to Products")
    def go_to_products(self) -> None:
        self.click(self.PRODUCTS_LINK)
        self.wait.until_url_contains("/products")

    def logged_in_user(self) -> str:
        """Name shown in 'Logged in as <name>'."""
        text = self.actions.get_trimmed_text(self.find_element(self.LOGGED_IN_AS))
        return text.split("Logged in as", 1)[-1].strip()

    @allure.step("Logout")
    def logout(self) -> None:
        self.click(self.LOGOUT_LINK)
        self.wait.until_url_contains("/login")

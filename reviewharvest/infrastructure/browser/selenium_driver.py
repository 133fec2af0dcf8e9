"""
Selenium Page Driver - Headless Chrome Implementation
======================================================

Implements the PageDriver interface with Selenium and a Chrome driver
installed by webdriver-manager.
"""

import logging
from typing import List, Optional

from selenium import webdriver
from selenium.webdriver.chrome.service import Service as ChromeService
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webelement import WebElement
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait
from selenium.common.exceptions import (
    NoSuchElementException,
    StaleElementReferenceException,
    TimeoutException,
    WebDriverException,
)
from webdriver_manager.chrome import ChromeDriverManager

from ..config import BrowserSettings, get_settings
from .page_driver import (
    SCROLL_TO_BOTTOM,
    NavigationStatus,
    PageDriver,
    PageNode,
    TriggerStatus,
    WaitStatus,
)

logger = logging.getLogger(__name__)

_ELEMENT_ERRORS = (NoSuchElementException, StaleElementReferenceException, WebDriverException)


class SeleniumNode(PageNode):
    """PageNode backed by a Selenium WebElement."""

    def __init__(self, element: WebElement):
        self._element = element

    def query(self, locator: str) -> List[PageNode]:
        try:
            return [SeleniumNode(el) for el in self._element.find_elements(By.CSS_SELECTOR, locator)]
        except _ELEMENT_ERRORS as e:
            logger.debug(f"Node query '{locator}' failed: {e}")
            return []

    def text(self) -> Optional[str]:
        try:
            # .text is empty for hidden nodes, textContent is not
            return self._element.text or self._element.get_attribute("textContent")
        except _ELEMENT_ERRORS:
            return None

    def attribute(self, name: str) -> Optional[str]:
        try:
            return self._element.get_attribute(name)
        except _ELEMENT_ERRORS:
            return None


class SeleniumPageDriver(PageDriver):
    """
    Chrome-based page driver.

    Usage:
        with SeleniumPageDriver() as driver:
            driver.navigate("https://global.oliveyoung.com/")
    """

    def __init__(self, settings: Optional[BrowserSettings] = None):
        self._settings = settings or get_settings().browser
        self.driver = self._create_driver()

    def _create_driver(self) -> webdriver.Chrome:
        """Create and configure Chrome WebDriver."""
        options = webdriver.ChromeOptions()

        if self._settings.headless:
            options.add_argument("--headless=new")
        options.add_argument("--disable-gpu")
        options.add_argument("--no-sandbox")
        options.add_argument("--disable-setuid-sandbox")
        options.add_argument("--disable-dev-shm-usage")
        options.add_argument(f"--window-size={self._settings.window_size}")

        # User agent to avoid blocking
        options.add_argument(f"user-agent={self._settings.user_agent}")

        service = ChromeService(ChromeDriverManager().install())
        driver = webdriver.Chrome(service=service, options=options)
        driver.set_page_load_timeout(self._settings.page_load_timeout)
        return driver

    def navigate(self, url: str) -> NavigationStatus:
        try:
            logger.debug(f"Navigating to: {url}")
            self.driver.get(url)
            return NavigationStatus.LOADED
        except (TimeoutException, WebDriverException) as e:
            logger.warning(f"Navigation failed for {url}: {e.__class__.__name__}")
            return NavigationStatus.FAILED

    def query(self, locator: str) -> List[PageNode]:
        try:
            return [SeleniumNode(el) for el in self.driver.find_elements(By.CSS_SELECTOR, locator)]
        except WebDriverException as e:
            logger.debug(f"Query '{locator}' failed: {e}")
            return []

    def wait_for(self, locator: str, timeout: float) -> WaitStatus:
        try:
            WebDriverWait(self.driver, timeout).until(
                EC.presence_of_element_located((By.CSS_SELECTOR, locator))
            )
            return WaitStatus.READY
        except TimeoutException:
            logger.debug(f"Timeout waiting for '{locator}'")
            return WaitStatus.TIMED_OUT

    def trigger(self, locator: str) -> TriggerStatus:
        if locator == SCROLL_TO_BOTTOM:
            try:
                self.driver.execute_script("window.scrollTo(0, document.body.scrollHeight);")
                return TriggerStatus.TRIGGERED
            except WebDriverException as e:
                logger.debug(f"Scroll failed: {e}")
                return TriggerStatus.NOT_FOUND

        try:
            control = self.driver.find_element(By.CSS_SELECTOR, locator)
            classes = (control.get_attribute("class") or "").split()
            if "disabled" in classes or not control.is_displayed() or not control.is_enabled():
                return TriggerStatus.NOT_FOUND
            self.driver.execute_script("arguments[0].scrollIntoView({block: 'center'});", control)
            self.driver.execute_script("arguments[0].click();", control)
            return TriggerStatus.TRIGGERED
        except NoSuchElementException:
            return TriggerStatus.NOT_FOUND
        except WebDriverException as e:
            logger.debug(f"Trigger '{locator}' failed: {e}")
            return TriggerStatus.NOT_FOUND

    def close(self) -> None:
        """Close browser and cleanup."""
        try:
            self.driver.quit()
            logger.info("Browser closed")
        except WebDriverException as e:
            logger.debug(f"Error closing browser: {e}")

import json
import socket
import subprocess
import time
from bs4 import BeautifulSoup
from selenium import webdriver
from selenium.common.exceptions import TimeoutException
from selenium.webdriver.chrome.service import Service as ChromeService
from selenium.webdriver.support.ui import WebDriverWait
from webdriver_manager.chrome import ChromeDriverManager
import config

class AuditError(Exception):
    """Raised when a single audit attempt fails."""

class AuditTimeoutError(AuditError):
    """Raised when Lighthouse does not finish within the audit timeout."""

def find_free_port():
    """Asks the OS for an unused local port for Chrome's remote debugging endpoint."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(('127.0.0.1', 0))
        return sock.getsockname()[1]

def create_driver(debugging_port):
    """
    Initializes a single headless Chrome WebDriver instance that also listens on
    `debugging_port`, so Lighthouse can attach to the same browser.
    """
    options = webdriver.ChromeOptions()
    options.add_argument('--headless')
    options.add_argument('--no-sandbox')
    options.add_argument('--disable-dev-shm-usage')
    options.add_argument(f"user-agent={config.USER_AGENT}")
    options.add_argument('--log-level=3')
    options.add_argument(f'--remote-debugging-port={debugging_port}')
    options.add_experimental_option('excludeSwitches', ['enable-automation'])
    options.add_experimental_option('useAutomationExtension', False)
    try:
        driver = webdriver.Chrome(service=ChromeService(ChromeDriverManager().install()), options=options)
        return driver
    except Exception as e:
        print(f"Could not start the local Chrome browser. Error: {e}")
        return None

def wait_for_network_idle(driver, timeout, idle_seconds=None):
    """
    Waits until the document is ready and no new resources have been requested
    for `idle_seconds`. Raises selenium's TimeoutException after `timeout` seconds.
    """
    if idle_seconds is None:
        idle_seconds = config.NETWORK_IDLE_SECONDS
    last_seen = {'count': None, 'since': time.monotonic()}

    def network_is_idle(drv):
        if drv.execute_script("return document.readyState") != 'complete':
            return False
        count = drv.execute_script("return window.performance.getEntriesByType('resource').length")
        now = time.monotonic()
        if count != last_seen['count']:
            last_seen['count'], last_seen['since'] = count, now
            return False
        return now - last_seen['since'] >= idle_seconds

    WebDriverWait(driver, timeout, poll_frequency=0.1).until(
        network_is_idle, message=f"Network did not go idle within {timeout:.0f} seconds"
    )

def navigate(driver, url):
    """Loads the page and waits for the network to settle, all within the navigation timeout."""
    timeout = config.NAVIGATION_TIMEOUT_SECONDS
    started = time.monotonic()
    driver.set_page_load_timeout(timeout)
    driver.get(url)
    remaining = timeout - (time.monotonic() - started)
    if remaining <= 0:
        raise TimeoutException(f"Navigation timeout of {timeout} seconds exceeded")
    wait_for_network_idle(driver, remaining)

def extract_meta_description(driver):
    """Returns the page's meta description, or a fixed fallback when there is none."""
    try:
        soup = BeautifulSoup(driver.page_source, 'html.parser')
        description_tag = soup.find('meta', attrs={'name': 'description'})
    except Exception as e:
        print(f"    Could not read the meta description. Error: {e}")
        return config.NO_META_DESCRIPTION
    if description_tag is None:
        return config.NO_META_DESCRIPTION
    return description_tag.get('content', '')

def run_lighthouse(url, debugging_port):
    """
    Runs the Lighthouse CLI against `url` through the already running browser and
    returns the parsed JSON report.

    The CLI races against AUDIT_TIMEOUT_SECONDS. If the timer wins the process is
    killed and whatever it produced is thrown away, so a late report never reaches
    the caller after the browser has been closed.
    """
    command = config.LIGHTHOUSE_COMMAND + [
        url,
        f"--port={debugging_port}",
        "--output=json",
        "--output-path=stdout",
        f"--only-categories={config.LIGHTHOUSE_CATEGORY}",
        "--quiet",
    ]
    try:
        process = subprocess.Popen(command, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True)
    except FileNotFoundError as e:
        raise AuditError(f"Lighthouse CLI not found ({' '.join(config.LIGHTHOUSE_COMMAND)}). Install it with npm.") from e

    try:
        stdout, stderr = process.communicate(timeout=config.AUDIT_TIMEOUT_SECONDS)
    except subprocess.TimeoutExpired:
        process.kill()
        process.communicate() # Discard the late output
        raise AuditTimeoutError(config.AUDIT_TIMEOUT_MESSAGE) from None

    if process.returncode != 0:
        details = (stderr or '').strip().splitlines()
        raise AuditError(f"Lighthouse exited with code {process.returncode}: {details[-1] if details else 'no output'}")
    try:
        return json.loads(stdout)
    except json.JSONDecodeError as e:
        raise AuditError(f"Could not parse the Lighthouse report. Error: {e}") from e

def extract_score(report):
    """Turns the report's 0-1 accessibility score into a 0-100 score."""
    category = (report.get('categories') or {}).get(config.LIGHTHOUSE_CATEGORY) or {}
    score = category.get('score')
    if score is None:
        raise AuditError(f"Lighthouse report has no {config.LIGHTHOUSE_CATEGORY} score")
    return round(score * 100, 2)

def run_audit(url):
    """
    Audits a single URL in a fresh browser session. Returns a dict with 'score',
    'metaTitle' and 'metaDescription', or raises so the caller can retry.
    The browser is closed on every path out of this function.
    """
    debugging_port = find_free_port()
    driver = create_driver(debugging_port)
    if not driver:
        raise AuditError("Could not start the headless Chrome browser")

    try:
        print(f"  Navigating to {url}")
        navigate(driver, url)

        print(f"  Extracting meta information from {url}")
        meta_title = driver.title or ''
        meta_description = extract_meta_description(driver)

        print(f"  Running Lighthouse audit on {url}")
        report = run_lighthouse(url, debugging_port)
        return {
            'score': extract_score(report),
            'metaTitle': meta_title,
            'metaDescription': meta_description,
        }
    except Exception as e:
        print(f"    Error during processing {url}: {e}")
        raise # Re-raise the exception to handle retries
    finally:
        driver.quit()

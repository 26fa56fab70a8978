import re
import pandas as pd
import config

SCHEME_PATTERN = re.compile(r'^https?://', re.IGNORECASE)

def normalize_url(raw_url):
    """Trims the URL and makes sure it carries an http:// or https:// scheme."""
    url = raw_url.strip()
    if not SCHEME_PATTERN.match(url):
        url = f"http://{url}"
    return url

def load_urls(path=None):
    """
    Reads the input CSV and returns the full, ordered list of normalized URLs.
    Rows without a value in the 'url' column are skipped. Extra columns are ignored.
    A missing input file is not handled here: the run cannot start without it.
    """
    path = path or config.INPUT_CSV_FILE
    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError:
        print(f"Input file '{path}' is empty.")
        return []

    if config.URL_COLUMN not in df.columns:
        print(f"Warning: Input file '{path}' has no '{config.URL_COLUMN}' column.")
        return []

    urls = []
    for raw_url in df[config.URL_COLUMN]:
        # Short rows come back as NaN even with keep_default_na=False
        if not isinstance(raw_url, str) or not raw_url.strip():
            continue
        urls.append(normalize_url(raw_url))

    print("CSV file successfully processed")
    return urls

def setup_results_file(path=None):
    """Creates (or truncates) the results CSV and writes its header row."""
    path = path or config.OUTPUT_CSV_FILE
    pd.DataFrame(columns=config.RESULT_COLUMNS).to_csv(path, index=False)
    return path

def append_result(path, result):
    """Appends a single result row to the results CSV, so finished audits survive a crash."""
    try:
        row = pd.DataFrame([result], columns=config.RESULT_COLUMNS)
        row.to_csv(path, mode='a', header=False, index=False)
    except Exception as e:
        print(f"  !! CRITICAL: Failed to save result for {result.get('url')}. Error: {e}")
        raise # Re-raise the exception to signal failure

import time
from tqdm import tqdm
import config
import csv_handler
import analyzer
from retry_policy import AuditState, next_state

def audit_with_retries(url, audit=analyzer.run_audit, sleep=time.sleep):
    """
    Runs `audit` on one URL under the retry policy and returns the final state
    (SUCCEEDED or EXHAUSTED) together with exactly one result row.
    `audit` and `sleep` can be swapped out, e.g. for stubs in tests.
    """
    state = AuditState.WAITING
    sleep(config.COURTESY_DELAY_SECONDS)

    attempt = 1
    state = AuditState.ATTEMPTING
    while state is AuditState.ATTEMPTING:
        print(f"Attempt {attempt} for {url}")
        try:
            result = audit(url)
        except Exception as e:
            print(f"Attempt {attempt} failed for {url}: {e}")
            state = next_state(attempt, str(e))
            if state is AuditState.ATTEMPTING:
                sleep(config.COURTESY_DELAY_SECONDS) # Wait before retrying
                attempt += 1
            continue

        state = next_state(attempt)
        print(f"Successfully processed {url} with score: {result['score']}")
        return state, {
            'url': url,
            'score': result['score'],
            'metaTitle': result['metaTitle'],
            'metaDescription': result['metaDescription'],
        }

    print(f"Max retries reached or audit timed out twice for {url}. Skipping.")
    return state, {
        'url': url,
        'score': 0,
        'metaTitle': config.NOT_AVAILABLE,
        'metaDescription': config.NOT_AVAILABLE,
    }

def run_audits(urls, output_path, audit=analyzer.run_audit, sleep=time.sleep):
    """
    Audits every URL in order, one at a time, appending each result to the
    output CSV as soon as it is known. Returns the list of URLs that were skipped.
    """
    csv_handler.setup_results_file(output_path)
    skipped_urls = []
    for url in tqdm(urls, desc="Auditing URLs"):
        print(f"\nProcessing {url}")
        state, result = audit_with_retries(url, audit=audit, sleep=sleep)
        csv_handler.append_result(output_path, result)
        if state is AuditState.EXHAUSTED:
            skipped_urls.append(url)
    return skipped_urls

def main():
    """Main function to orchestrate the Lighthouse accessibility audit."""
    print("Starting Lighthouse Accessibility Auditor...")
    urls = csv_handler.load_urls(config.INPUT_CSV_FILE)
    if not urls:
        csv_handler.setup_results_file(config.OUTPUT_CSV_FILE)
        print(f"No URLs found in '{config.INPUT_CSV_FILE}'. Exiting.")
        return

    print(f"Found {len(urls)} URLs to audit.")
    skipped_urls = run_audits(urls, config.OUTPUT_CSV_FILE, audit=analyzer.run_audit)

    print(f"\nLighthouse audits completed and results saved to {config.OUTPUT_CSV_FILE}")
    if skipped_urls:
        print("\nThe following URLs could not be audited and were recorded with a score of 0:")
        for url in skipped_urls:
            print(f"- {url}")

if __name__ == "__main__":
    main()

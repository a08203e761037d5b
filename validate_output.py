"""Post-build validator for Open Graph metadata.

Checks every HTML file in output/ for the Open Graph properties link preview
consumers need before deployment. Reports pages without og:title, og:type or
og:url, og:image values that are not absolute http(s) URLs, and images whose
declared width or height is below the 200px minimum.

Usage:
    python validate_output.py                    # default: output/
    python validate_output.py --check-external   # also HEAD every og:image (slow)
    python validate_output.py --output-dir public

Exit codes:
    0 = all validations passed
    1 = validation errors found
"""
from __future__ import annotations

import argparse
import sys
from collections import defaultdict
from pathlib import Path
from urllib.parse import urlparse

try:
    from bs4 import BeautifulSoup
    import requests
except ImportError:
    print("[ERROR] Missing dependencies. Install with: pip install beautifulsoup4 requests")
    sys.exit(2)

REQUIRED_PROPERTIES = ('og:title', 'og:type', 'og:url')
MIN_IMAGE_DIMENSION = 200


def extract_properties(html_file: Path, output_dir: Path) -> list[tuple[str, str]]:
    """Return (property, content) pairs of all <meta property> elements, in order."""
    try:
        with open(html_file, 'r', encoding='utf-8') as f:
            soup = BeautifulSoup(f.read(), 'html.parser')
    except (OSError, UnicodeDecodeError) as e:
        print(f"[WARN] Failed to parse {html_file.relative_to(output_dir)}: {e}")
        return []

    pairs = []
    head = soup.head or soup
    for meta in head.find_all('meta', attrs={'property': True}):
        pairs.append((meta['property'].strip(), meta.get('content', '').strip()))
    return pairs


def group_images(pairs: list[tuple[str, str]]) -> list[dict[str, str]]:
    """Fold og:image and its structured properties into one dict per image."""
    images: list[dict[str, str]] = []
    for prop, content in pairs:
        if prop in ('og:image', 'og:image:url'):
            images.append({'url': content})
        elif prop.startswith('og:image:') and images:
            images[-1][prop[len('og:image:'):]] = content
    return images


def is_absolute_http(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)


def validate_page(pairs: list[tuple[str, str]]) -> list[str]:
    """Return problems found in one page's Open Graph properties."""
    problems = []
    present = {prop for prop, content in pairs if content}
    for required in REQUIRED_PROPERTIES:
        if required not in present:
            problems.append(f"Missing {required}")

    for image in group_images(pairs):
        url = image.get('url', '')
        if not is_absolute_http(url):
            problems.append(f"Image URL is not absolute: {url or '(empty)'}")
        for edge in ('width', 'height'):
            value = image.get(edge)
            if value is None:
                continue
            if not value.isdigit():
                problems.append(f"Image {edge} is not a number: {url} {edge}={value}")
            elif int(value) < MIN_IMAGE_DIMENSION:
                problems.append(f"Image too small: {url} {edge}={value}")
    return problems


def validate_open_graph(output_dir: Path) -> tuple[dict[str, list[str]], set[str]]:
    """Validate all pages. Returns (errors, image_urls)."""
    errors = defaultdict(list)
    image_urls = set()
    html_files = sorted(output_dir.rglob('*.html'))

    print(f"[INFO] Validating Open Graph metadata in {len(html_files)} HTML files in {output_dir}...")

    for html_file in html_files:
        pairs = extract_properties(html_file, output_dir)
        rel_source = str(html_file.relative_to(output_dir))
        if not pairs:
            errors[rel_source].append("No Open Graph metadata")
            continue
        errors[rel_source].extend(validate_page(pairs))
        for image in group_images(pairs):
            if is_absolute_http(image.get('url', '')):
                image_urls.add(image['url'])

    return {source: issues for source, issues in errors.items() if issues}, image_urls


def check_external_images(image_urls: set[str]) -> dict[str, list[str]]:
    """Optionally confirm every og:image URL responds (slow)."""
    errors = defaultdict(list)
    print(f"[INFO] Checking {len(image_urls)} unique image URLs (this may take a while)...")

    for url in sorted(image_urls):
        try:
            resp = requests.head(url, timeout=10, allow_redirects=True)
            if resp.status_code >= 400:
                errors['external'].append(f"{url} → HTTP {resp.status_code}")
        except requests.RequestException as e:
            errors['external'].append(f"{url} → {type(e).__name__}: {e}")

    return errors


def print_report(page_errors: dict, external_errors: dict, output_dir: Path) -> int:
    """Print validation report and return exit code."""
    has_errors = bool(page_errors or external_errors)

    print("\n" + "=" * 70)
    print("OPEN GRAPH REPORT")
    print("=" * 70)

    if page_errors:
        total_errors = sum(len(v) for v in page_errors.values())
        print(f"\n[FAIL] PAGE ERRORS ({total_errors} total):\n")
        for source, issues in sorted(page_errors.items()):
            print(f"  {source}:")
            for issue in issues:
                print(f"    • {issue}")
        print("\n  Suggestions:")
        print("     • Check that the theme prints the open_graph attribute inside <head>")
        print("     • Set SITEURL to an absolute https:// address in publishconf.py")
    else:
        print("\n[OK] All pages carry valid Open Graph metadata!")

    if external_errors:
        print(f"\n[FAIL] IMAGE URL ERRORS ({len(external_errors['external'])} total):\n")
        for issue in external_errors['external']:
            print(f"  • {issue}")

    print("\n" + "=" * 70)
    print("SUMMARY:")
    print(f"  • HTML files checked: {len(list(output_dir.rglob('*.html')))}")
    print(f"  • Pages with errors: {len(page_errors)}")
    if external_errors:
        print(f"  • Unreachable images: {len(external_errors.get('external', []))}")
    print("=" * 70)

    if has_errors:
        print("\nValidation FAILED - fix errors before deploying!")
        return 1
    print("\nValidation PASSED - link previews are ready!")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Validate Open Graph metadata in the built site")
    parser.add_argument('--output-dir', default='output', help='Output directory to validate (default: output)')
    parser.add_argument('--check-external', action='store_true', help='HEAD every og:image URL (slow)')
    args = parser.parse_args(argv)

    output_dir = Path(args.output_dir).resolve()
    if not output_dir.exists():
        print(f"[ERROR] Output directory not found: {output_dir}")
        print("Run 'pelican content' to generate the site first.")
        return 1

    page_errors, image_urls = validate_open_graph(output_dir)

    external_errors = {}
    if args.check_external:
        external_errors = check_external_images(image_urls)

    return print_report(page_errors, external_errors, output_dir)


if __name__ == '__main__':
    sys.exit(main())

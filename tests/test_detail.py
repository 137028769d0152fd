from bs4 import BeautifulSoup

from rhjobs.pipeline.detail import collect_detail, extract_fallback, extract_structured, reconcile_detail

URL = "https://www.roberthalf.com/us/en/job/chicago-il/payroll-clerk/02020-0012"

DETAIL_PAGE = """
<html><head>
<script type="application/ld+json">
{"@context": "https://schema.org", "@type": "JobPosting",
 "title": "Payroll Clerk (LD)",
 "description": "<p>Run the weekly <b>payroll</b>.</p>",
 "datePosted": "2024-06-03",
 "employmentType": "TEMPORARY",
 "baseSalary": {"currency": "USD", "value": {"minValue": 22, "maxValue": 25, "unitText": "HOUR"}}}
</script>
</head><body>
  <h1>Payroll Clerk (DOM)</h1>
  <div class="job-location">Chicago, IL</div>
  <div class="job-salary">$1 - $2</div>
  <div class="job-description"><p>DOM description</p></div>
</body></html>
"""


def test_listing_data_beats_jsonld_beats_dom():
    meta = {
        "title": "Payroll Clerk",
        "company": "Robert Half",
        "url": URL,
        "job_id": "02020-0012",
        "source": "roberthalf.com",
    }
    record = collect_detail(DETAIL_PAGE, meta, URL)

    assert record["title"] == "Payroll Clerk"           # listing
    assert record["salary"] == "$22 - $25 / hour"       # JSON-LD over DOM
    assert record["date_posted"] == "2024-06-03"        # JSON-LD
    assert record["job_type"] == "TEMPORARY"            # JSON-LD
    assert record["location"] == "Chicago, IL"          # DOM only
    assert record["description_html"] == "<p>Run the weekly <b>payroll</b>.</p>"
    assert record["description_text"] == "Run the weekly payroll."
    assert record["job_id"] == "02020-0012"
    assert record["url"] == URL


def test_dom_only_page_and_defaults():
    html = """
    <h1> Senior Accountant | Robert Half </h1>
    <span class="posted-date">Posted 3 days ago</span>
    <section class="description-body"><p>Close the books</p></section>
    """
    record = collect_detail(html, None, URL)
    assert record["title"] == "Senior Accountant"
    assert record["date_posted"] == "Posted 3 days ago"
    assert record["description_html"] == "<p>Close the books</p>"
    assert record["description_text"] == "Close the books"
    assert record["company"] == "Robert Half"
    assert record["source"] == "roberthalf.com"
    assert record["url"] == URL
    assert record["job_id"] == "/us/en/job/chicago-il/payroll-clerk/02020-0012"


def test_listing_description_text_is_kept_with_its_html():
    meta = {"title": "Clerk", "description_html": "<p>Listing desc</p>", "description_text": "Listing desc"}
    structured = {"description_html": "<p>Detail desc</p>"}
    record = reconcile_detail(meta, structured, None, URL)
    assert record["description_html"] == "<p>Listing desc</p>"
    assert record["description_text"] == "Listing desc"


def test_empty_detail_page():
    soup = BeautifulSoup("<html></html>", "html.parser")
    assert extract_structured(soup) is None
    assert extract_fallback(soup) == {}
    record = reconcile_detail(None, None, None, None)
    assert record["title"] is None
    assert record["job_id"] is None
    assert record["company"] == "Robert Half"


def test_detail_page_employer_beats_fill_in_company():
    html = """
    <script type="application/ld+json">
    {"@type": "JobPosting", "title": "IT Auditor",
     "hiringOrganization": {"@type": "Organization", "name": "Protiviti"}}
    </script>
    """
    meta = {"title": "IT Auditor", "company": "Robert Half", "source": "roberthalf.com", "url": URL}
    record = collect_detail(html, meta, URL)
    assert record["company"] == "Protiviti"
    assert record["source"] == "roberthalf.com"

from rhjobs.pipeline.listing import ListingReconciler, reconcile_html
from rhjobs.pipeline.normalize import derive_job_id, from_api_job, listing_from_api_job

DETAIL_PATH = "/us/en/job/chicago-il/payroll-clerk/02020-0012"
DETAIL_URL = "https://www.roberthalf.com" + DETAIL_PATH

SEARCH_PAGE = r"""
<html><head>
<script>
aemSettings.rh_job_search.results = JSON.parse('{\"jobs\":[{\"jobtitle\":\"Payroll Clerk\",\"job_detail_url\":\"/us/en/job/chicago-il/payroll-clerk/02020-0012\",\"city\":\"Chicago\",\"stateprovince\":\"IL\",\"unique_job_number\":\"02020-0012\",\"description\":\"<p>Process   payroll<\/p>\",\"emptype\":\"Temporary\",\"remote\":\"No\"}],\"totalCount\":57}');
</script>
<script type="application/ld+json">
{"@type": "JobPosting", "title": "Bookkeeper | Robert Half", "url": "https://www.roberthalf.com/us/en/job/austin-tx/bookkeeper/B7",
 "datePosted": "2024-05-01", "employmentType": ["FULL_TIME", "CONTRACTOR"]}
</script>
</head>
<body>
  <a href="/us/en/job/chicago-il/payroll-clerk/02020-0012">Payroll Clerk - Temp</a>
  <a href="/us/en/job/austin-tx/bookkeeper/B7">Bookkeeper</a>
  <a href="/us/en/job/denver-co/tax-senior/T3?src=search">Tax Senior</a>
</body></html>
"""


def test_same_url_from_embedded_json_and_links_merges_into_one():
    listings, total = reconcile_html(SEARCH_PAGE)
    urls = [item["url"] for item in listings]
    assert urls.count(DETAIL_URL) == 1

    payroll = next(item for item in listings if item["url"] == DETAIL_URL)
    # link text came later and overrides the title
    assert payroll["title"] == "Payroll Clerk - Temp"
    # fields the link parser doesn't know survive
    assert payroll["location"] == "Chicago, IL"
    assert payroll["job_type"] == "Temporary"
    assert payroll["remote"] == "On-site"
    assert payroll["job_id"] == "02020-0012"
    assert payroll["description_html"] == "<p>Process   payroll</p>"
    assert payroll["description_text"] == "Process payroll"
    assert payroll["company"] == "Robert Half"
    assert payroll["source"] == "roberthalf.com"
    assert total == 57


def test_listing_order_and_url_derived_ids():
    listings, _ = reconcile_html(SEARCH_PAGE)
    assert [item["title"] for item in listings] == ["Payroll Clerk - Temp", "Bookkeeper", "Tax Senior"]

    bookkeeper = listings[1]
    assert bookkeeper["date_posted"] == "2024-05-01"
    assert bookkeeper["job_type"] == "FULL_TIME, CONTRACTOR"
    assert bookkeeper["job_id"] == "/us/en/job/austin-tx/bookkeeper/B7"
    assert listings[2]["job_id"] == "/us/en/job/denver-co/tax-senior/T3?src=search"


def test_page_without_anything_gives_nothing():
    assert reconcile_html("<html><body><p>No results</p></body></html>") == ([], 0)


def test_reconciler_keeps_unkeyed_listings_apart():
    reconciler = ListingReconciler()
    reconciler.add({"title": "Analyst"})
    reconciler.add({"title": "Analyst"})
    reconciler.add({"title": "Clerk", "url": DETAIL_URL})
    reconciler.add({"salary": "$20 / hour", "url": DETAIL_URL})
    assert len(reconciler) == 3

    listings = reconciler.listings()
    assert [item["job_id"] for item in listings] == [None, None, DETAIL_PATH]
    assert listings[2]["title"] == "Clerk"
    assert listings[2]["salary"] == "$20 / hour"


def test_derive_job_id():
    assert derive_job_id("J-1", DETAIL_URL) == "J-1"
    assert derive_job_id(12345, None) == "12345"
    assert derive_job_id(None, "https://www.roberthalf.com/us/en/job/x/1?a=b") == "/us/en/job/x/1?a=b"
    assert derive_job_id(None, "https://www.roberthalf.com/") is None
    assert derive_job_id(None, None) is None


def test_api_job_adapter_aliases_and_defaults():
    job = {
        "title": "Senior Accountant | Robert Half",
        "sf_jo_number": "SF-9",
        "url": "https://www.roberthalf.com/us/en/job/x/SF-9",
        "payrate_min": 80000,
        "payrate_max": 95000,
        "payrate_period": "year",
        "functional_role": "Accounting",
        "skills": "<ul><li>GAAP</li><li>Excel</li></ul>",
        "remote": "yes",
    }
    partial = from_api_job(job)
    assert "description_html" not in partial
    record = listing_from_api_job(job)
    assert record["title"] == "Senior Accountant"
    assert record["job_id"] == "SF-9"
    assert record["salary"] == "$80,000 - $95,000 / year"
    assert record["specialization"] == "Accounting"
    assert record["skills"] == "GAAP Excel"
    assert record["remote"] == "Remote"
    assert record["description_text"] is None

from bs4 import BeautifulSoup

from autoapply.scraper import card_nodes, scrape, scrape_page
from tests.fakes import card, results_page


def _container(html: str):
    return BeautifulSoup(html, "html.parser").find(id="mosaic-provider-jobcards-1")


def test_card_missing_location_is_dropped():
    html = results_page(card("j1", title="First"), card("j2", location=None), card("j3", title="Third"))
    jobs = scrape(_container(html), "https://www.indeed.com/jobs")
    assert [j.external_id for j in jobs] == ["j1", "j3"]
    assert [j.title for j in jobs] == ["First", "Third"]


def test_every_field_is_required():
    variants = [
        card("x", title=None),
        card("x", company=None),
        card("x", description=None),
        card("x", badge=None),
        card("x", href=""),
        card("x", location="   "),
    ]
    html = results_page(card("keep"), *variants)
    assert [j.external_id for j in scrape(_container(html))] == ["keep"]


def test_fields_are_extracted_and_url_resolved():
    html = results_page(card("abc", title="Data  Analyst", company="Globex"))
    job = scrape(_container(html), "https://www.indeed.com/jobs?q=data")[0]
    assert job.title == "Data Analyst"
    assert job.company_name == "Globex"
    assert job.location == "Dallas, TX"
    assert job.company_description == "Full-time Health insurance"
    assert job.apply_url == "https://www.indeed.com/rc/clk?jk=abc"
    assert job.application_type == "Easily apply"


def test_nested_list_items_are_not_cards():
    html = results_page(card("a"), card("b"))
    assert len(card_nodes(_container(html))) == 2


def test_absent_or_empty_container_yields_nothing():
    assert scrape(None) == []
    empty = BeautifulSoup('<div id="c"></div>', "html.parser").find(id="c")
    assert scrape(empty) == []
    assert scrape_page("<html><body><p>nothing</p></body></html>") == []


def test_search_results_container_is_used():
    html = results_page(card("s1"), container_id="mosaic-jobResults")
    assert [j.external_id for j in scrape_page(html)] == ["s1"]

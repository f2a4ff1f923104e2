"""Tests for SearchClient paging arguments and response normalization."""

import httpx
import pytest

from affiliation_survey.exceptions import ErrorCode, RemoteError, ValidationError
from affiliation_survey.extractors.search import SearchClient
from affiliation_survey.models import Query


pytestmark = pytest.mark.fast


def _hit(identifier):
    return {"orcid-identifier": {"uri": f"https://orcid.org/{identifier}", "path": identifier}}


@pytest.fixture
def captured():
    return []


@pytest.fixture
def search_client(make_client, captured):
    def handler(request):
        captured.append(dict(request.url.params))
        return httpx.Response(
            200, json={"num-found": 3, "result": [_hit("0000-0001"), _hit("0000-0002")]}
        )

    return SearchClient(make_client(handler))


class TestArguments:
    def test_passes_query_offset_and_limit(self, search_client, captured):
        search_client.search(Query(text="affiliation-org-name:X"), offset=200, limit=200)

        assert captured == [{"q": "affiliation-org-name:X", "start": "200", "rows": "200"}]

    def test_accepts_plain_string(self, search_client, captured):
        search_client.search("ringgold-org-id:1234")
        assert captured[0]["q"] == "ringgold-org-id:1234"
        assert captured[0]["rows"] == "1000"

    @pytest.mark.parametrize("offset,limit", [(-1, 10), (0, 0), (0, 1001), (5, -3)])
    def test_invalid_arguments_rejected_without_request(self, search_client, captured, offset, limit):
        with pytest.raises(ValidationError):
            search_client.search("q", offset=offset, limit=limit)
        assert captured == []

    def test_blank_query_rejected_without_request(self, search_client, captured):
        with pytest.raises(ValidationError):
            search_client.search("  ")
        assert captured == []

    def test_offset_beyond_cap_is_forwarded(self, search_client, captured):
        search_client.search("q", offset=9900, limit=1000)
        assert captured[0]["start"] == "9900"


class TestNormalization:
    def test_rows_and_found(self, search_client):
        rows, found = search_client.search("q")

        assert found == 3
        assert [r.identifier for r in rows] == ["0000-0001", "0000-0002"]
        assert all(r.total_found == 3 for r in rows)

    def test_count_probes_with_one_row(self, search_client, captured):
        assert search_client.count("q") == 3
        assert captured[0]["rows"] == "1"

    def test_missing_count_is_malformed(self, make_client):
        client = SearchClient(make_client(lambda r: httpx.Response(200, json={"result": []})))

        with pytest.raises(RemoteError) as exc_info:
            client.search("q")

        assert exc_info.value.status_code == ErrorCode.REMOTE_MALFORMED_RESPONSE

    def test_non_numeric_count_is_malformed(self, make_client):
        client = SearchClient(
            make_client(lambda r: httpx.Response(200, json={"num-found": "many"}))
        )
        with pytest.raises(RemoteError):
            client.search("q")

    @pytest.mark.parametrize(
        "payload",
        [
            {"num-found": 3, "result": 7},
            {"num-found": 3, "result": True},
            {"num-found": 3, "result": "0000-0001"},
            {"num-found": -1, "result": []},
        ],
    )
    def test_bad_envelope_is_malformed(self, make_client, payload):
        client = SearchClient(make_client(lambda r: httpx.Response(200, json=payload)))

        with pytest.raises(RemoteError) as exc_info:
            client.search("q")

        assert exc_info.value.status_code == ErrorCode.REMOTE_MALFORMED_RESPONSE
        assert exc_info.value.retryable is False

    def test_single_hit_as_bare_object(self, make_client):
        payload = {"num-found": 1, "result": _hit("0000-0001")}
        client = SearchClient(make_client(lambda r: httpx.Response(200, json=payload)))

        page = client.search("q")

        assert page.identifiers == ["0000-0001"]

    @pytest.mark.parametrize("result", [None, []])
    def test_absent_results_mean_no_rows(self, make_client, result):
        payload = {"num-found": 0}
        if result is not None:
            payload["result"] = result
        client = SearchClient(make_client(lambda r: httpx.Response(200, json=payload)))

        rows, found = client.search("q")

        assert rows == [] and found == 0

    def test_identifier_fallback_paths_and_drops(self, make_client):
        payload = {
            "num-found": 4,
            "result": [
                {"orcid-identifier": None, "orcid-id": "0000-0003"},
                {"path": "0000-0004"},
                {"orcid-identifier": {"path": None}},
                {"something": "else"},
            ],
        }
        client = SearchClient(make_client(lambda r: httpx.Response(200, json=payload)))

        page = client.search("q")

        assert page.identifiers == ["0000-0003", "0000-0004"]
        assert page.found == 4

    def test_transport_errors_propagate(self, make_client):
        client = SearchClient(make_client(lambda r: httpx.Response(502)))
        with pytest.raises(RemoteError) as exc_info:
            client.search("q")
        assert exc_info.value.retryable is True

import unittest

import httpx

from fake_cms import FakeCms, facility_row, open_client, rows


class SearchFacilityTests(unittest.TestCase):
    def test_no_parameters_short_circuits(self):
        fake = FakeCms()
        client = open_client(self, fake)

        for params in ({}, {"name": "", "city": "", "state": ""}, {"name": "   "}):
            with self.subTest(params=params):
                response = client.get("/api/search-facility", params=params)
                self.assertEqual(response.status_code, 200)
                self.assertEqual(response.json(), [])
        self.assertEqual(fake.requests, [])

    def test_search_values_sent_untrimmed(self):
        fake = FakeCms(rows(facility_row()))
        client = open_client(self, fake)

        client.get("/api/search-facility", params={"name": "  burns ", "city": "   "})
        self.assertEqual(fake.filters, ["Facility Name contains '  burns '"])

    def test_maps_rows_to_summaries(self):
        fake = FakeCms(rows(facility_row(), facility_row(ccn="015010", name="ATHENS HEALTH")))
        client = open_client(self, fake)

        response = client.get("/api/search-facility", params={"name": "burns", "state": "AL"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json()[0],
            {"ccn": "015009", "name": "BURNS NURSING HOME, INC.", "city": "RUSSELLVILLE", "state": "AL"},
        )
        self.assertEqual(len(response.json()), 2)
        self.assertEqual(fake.filters, ["Facility Name contains 'burns' AND State = 'AL'"])
        self.assertEqual(fake.limits, ["100"])
        self.assertEqual(fake.requests[0].url.path, "/api/views/homes/rows.json")

    def test_missing_fields_use_fallbacks(self):
        fake = FakeCms(rows(facility_row(ccn=None, name=None, city="", state=None), ["short"]))
        client = open_client(self, fake)

        response = client.get("/api/search-facility", params={"city": "dayton"})
        fallback = {"ccn": "UNKNOWN", "name": "Unknown Facility", "city": "Unknown", "state": "Unknown"}
        self.assertEqual(response.json(), [fallback, fallback])

    def test_results_capped_at_twenty(self):
        many = [facility_row(ccn=f"{i:06d}") for i in range(35)]
        client = open_client(self, FakeCms(rows(*many)))

        response = client.get("/api/search-facility", params={"state": "AL"})
        body = response.json()
        self.assertEqual(len(body), 20)
        self.assertEqual(body[-1]["ccn"], "000019")

    def test_state_only_empty_retries_state_wide(self):
        wide = [facility_row(ccn=f"{i:06d}", state="OH") for i in range(25)]
        fake = FakeCms(rows(), rows(*wide))
        client = open_client(self, fake)

        response = client.get("/api/search-facility", params={"state": "OH"})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(len(body), 20)
        self.assertEqual([item["ccn"] for item in body], [f"{i:06d}" for i in range(20)])
        self.assertEqual(fake.filters, ["State = 'OH'", "State = 'OH'"])
        self.assertEqual(fake.limits, ["100", "200"])

    def test_name_and_state_empty_retries_without_state(self):
        fake = FakeCms(rows(), rows(facility_row(state="AL")))
        client = open_client(self, fake)

        response = client.get("/api/search-facility", params={"name": "burns", "state": "Alabama"})
        self.assertEqual(response.json()[0]["ccn"], "015009")
        self.assertEqual(
            fake.filters,
            ["Facility Name contains 'burns' AND State = 'Alabama'", "Facility Name contains 'burns'"],
        )
        self.assertEqual(fake.limits, ["100", "100"])

    def test_name_and_city_without_state_does_not_retry(self):
        fake = FakeCms(rows())
        client = open_client(self, fake)

        response = client.get("/api/search-facility", params={"name": "burns", "city": "russellville"})
        self.assertEqual(response.json(), [])
        self.assertEqual(len(fake.requests), 1)

    def test_all_retries_empty_is_empty_list(self):
        fake = FakeCms(rows(), rows())
        client = open_client(self, fake)

        response = client.get("/api/search-facility", params={"city": "nowhere", "state": "ZZ"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [])
        self.assertEqual(len(fake.requests), 2)

    def test_failed_retry_falls_through(self):
        fake = FakeCms(rows(), httpx.Response(500))
        client = open_client(self, fake)

        response = client.get("/api/search-facility", params={"state": "OH"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [])
        self.assertEqual(len(fake.requests), 2)

    def test_retry_transport_failure_falls_through(self):
        fake = FakeCms(rows(), httpx.ConnectError("reset"))
        client = open_client(self, fake)

        response = client.get("/api/search-facility", params={"name": "burns", "state": "AL"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [])
        self.assertEqual(len(fake.requests), 2)

    def test_primary_network_failure_is_500_without_retries(self):
        fake = FakeCms(httpx.ConnectError("connection refused"))
        client = open_client(self, fake)

        response = client.get("/api/search-facility", params={"state": "OH"})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["error"], "Failed to search facilities")
        self.assertIn("connection refused", response.json()["details"])
        self.assertEqual(len(fake.requests), 1)

    def test_primary_non_success_is_500(self):
        client = open_client(self, FakeCms(httpx.Response(400)))

        response = client.get("/api/search-facility", params={"name": "x"})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            response.json(),
            {"error": "Failed to search facilities", "details": "CMS API returned 400"},
        )


class FacilityDetailTests(unittest.TestCase):
    def test_returns_detail(self):
        fake = FakeCms(rows(facility_row()))
        client = open_client(self, fake)

        response = client.get("/api/facility/015009")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            {
                "ccn": "015009",
                "name": "BURNS NURSING HOME, INC.",
                "city": "RUSSELLVILLE",
                "state": "AL",
                "address": "RUSSELLVILLE, AL 35653",
                "phone": "2563324110",
                "beds": "57",
                "type": "Skilled Nursing Facility",
            },
        )
        self.assertEqual(fake.filters, ["Provider ID = 015009"])
        self.assertEqual(fake.limits, ["1"])

    def test_missing_fields_use_fallbacks(self):
        empty = facility_row(ccn=None, name=None, city=None, state=None, zip_code=None, phone=None, beds=None)
        client = open_client(self, FakeCms(rows(empty)))

        body = client.get("/api/facility/999999").json()
        self.assertEqual(body["ccn"], "999999")
        self.assertEqual(body["name"], "Unknown")
        self.assertEqual(body["city"], "Unknown")
        self.assertEqual(body["state"], "Unknown")
        self.assertEqual(body["address"], ",")
        self.assertEqual(body["phone"], "N/A")
        self.assertEqual(body["beds"], "N/A")

    def test_numeric_beds_pass_through(self):
        client = open_client(self, FakeCms(rows(facility_row(beds=120))))
        self.assertEqual(client.get("/api/facility/015009").json()["beds"], 120)

    def test_array_valued_beds_relayed_as_is(self):
        client = open_client(self, FakeCms(rows(facility_row(beds=[None, "57"]))))

        response = client.get("/api/facility/015009")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["beds"], [None, "57"])

    def test_not_found(self):
        client = open_client(self, FakeCms(rows()))

        response = client.get("/api/facility/000000")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "Facility not found"})

    def test_upstream_failure(self):
        fake = FakeCms(httpx.ReadTimeout("timed out"))
        client = open_client(self, fake)

        response = client.get("/api/facility/015009")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["error"], "Failed to fetch facility")
        self.assertIn("timed out", response.json()["details"])
        self.assertEqual(len(fake.requests), 1)


if __name__ == "__main__":
    unittest.main()

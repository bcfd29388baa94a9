from datetime import datetime, timedelta, timezone
from io import BytesIO

import pytest

from conftest import image_bytes
from proofpage.extensions import db
from proofpage.models import testimonial_request as request_models
from proofpage.models.page import ProofPage
from proofpage.models.section import ProofSection


def _page_for(user):
    return ProofPage.query.filter_by(user_id=user.id).one()


class TestOverview:
    def test_first_visit_creates_draft_page(self, auth_client):
        client, user = auth_client

        response = client.get("/api/v1/dashboard")

        assert response.status_code == 200
        body = response.get_json()
        assert body["page"]["slug"] == "alex"
        assert body["page"]["status"] == "draft"
        assert body["page"]["title"] == "alex@example.com"
        assert body["page"]["headline"] == "Freelancer"
        assert body["urls"]["share_url"] == "https://proof.test/p/alex/share"
        assert body["stats"] == {"views": 0, "cta_clicks": 0, "pending_requests": 0}
        assert body["strength"]["score"] == 2
        assert body["share_summary"].endswith("View full proof:\nhttps://proof.test/p/alex/share")

    def test_second_visit_reuses_page(self, auth_client):
        client, user = auth_client
        client.get("/api/v1/dashboard")
        client.get("/api/v1/dashboard")

        assert ProofPage.query.filter_by(user_id=user.id).count() == 1


class TestUpdatePage:
    def test_publish(self, auth_client):
        client, user = auth_client
        client.get("/api/v1/dashboard")

        response = client.put("/api/v1/dashboard/page", json={
            "title": "Alex Rivera",
            "headline": "Product designer",
            "bio": "  ",
            "slug": "Alex Rivera Design",
            "status": "published",
            "theme": "dark",
            "accent_color": "#112233",
            "cta_enabled": True,
            "cta_label": "Hire me",
            "cta_url": "alex@example.com",
        })

        assert response.status_code == 200
        assert response.get_json()["toast"] == {"message": "Proof page saved and published.", "type": "success"}
        page = _page_for(user)
        assert page.slug == "alex-rivera-design"
        assert page.bio is None
        assert page.cta_url == "mailto:alex@example.com"

    def test_email_cta_survives_click_and_resave(self, auth_client):
        client, user = auth_client
        client.get("/api/v1/dashboard")
        form = {
            "title": "Alex",
            "headline": "Designer",
            "slug": "alex",
            "status": "published",
            "cta_enabled": True,
            "cta_url": "alex@example.com",
        }

        client.put("/api/v1/dashboard/page", json=form)
        stored = _page_for(user).cta_url
        assert stored == "mailto:alex@example.com"

        click = client.get("/p/alex/share/cta")
        assert click.status_code == 302
        assert click.headers["Location"] == "mailto:alex@example.com"

        client.put("/api/v1/dashboard/page", json={**form, "cta_url": stored})
        assert _page_for(user).cta_url == "mailto:alex@example.com"

    def test_invalid_accent_color(self, auth_client):
        client, user = auth_client
        client.get("/api/v1/dashboard")

        response = client.put("/api/v1/dashboard/page", json={
            "title": "Alex", "headline": "Designer", "slug": "alex", "accent_color": "blue",
        })

        assert response.status_code == 400
        assert response.get_json()["toast"]["type"] == "error"
        assert _page_for(user).accent_color == "#3B82F6"

    def test_slug_taken_by_other_page(self, auth_client, make_page, make_user):
        client, _ = auth_client
        make_page(user=make_user("sam@example.com"), slug="sam")
        client.get("/api/v1/dashboard")

        response = client.put("/api/v1/dashboard/page", json={"title": "Alex", "headline": "x", "slug": "sam"})

        assert response.status_code == 400
        assert response.get_json()["toast"]["message"] == "That public URL is already taken."

    def test_stale_write_is_rejected(self, auth_client):
        client, _ = auth_client
        client.get("/api/v1/dashboard")
        stale = (datetime.now(timezone.utc) - timedelta(days=1)).strftime("%a, %d %b %Y %H:%M:%S GMT")

        response = client.put(
            "/api/v1/dashboard/page",
            json={"title": "Alex", "headline": "x", "slug": "alex"},
            headers={"If-Unmodified-Since": stale},
        )

        assert response.status_code == 409

    def test_current_timestamp_is_accepted(self, auth_client):
        client, _ = auth_client
        updated_at = client.get("/api/v1/dashboard").get_json()["page"]["updated_at"]

        response = client.put(
            "/api/v1/dashboard/page",
            json={"title": "Alex", "headline": "x", "slug": "alex"},
            headers={"If-Unmodified-Since": updated_at},
        )

        assert response.status_code == 200


class TestSectionsAndItems:
    def test_section_item_flow(self, auth_client):
        client, user = auth_client
        client.get("/api/v1/dashboard")

        section_id = client.post("/api/v1/dashboard/sections", json={"type": "work_example"}).get_json()["id"]
        created = client.post(f"/api/v1/dashboard/sections/{section_id}/work-examples", json={
            "new_description": "Checkout redesign",
            "new_metric_text": "+32% conversion",
        })
        assert created.status_code == 201
        work_id = created.get_json()["id"]

        updated = client.put(f"/api/v1/dashboard/work-examples/{work_id}", json={
            "description": "Checkout redesign v2",
            "metric_text": "+40% conversion",
        })
        assert updated.get_json()["toast"]["message"] == "Work example saved."

        strength = client.get("/api/v1/dashboard/strength").get_json()
        assert next(i for i in strength["items"] if i["key"] == "work_metrics")["earned"] == 1

        summary = client.get("/api/v1/dashboard/share-summary").get_json()["summary"]
        assert "• +40% conversion" in summary

        deleted = client.delete(f"/api/v1/dashboard/work-examples/{work_id}")
        assert deleted.get_json()["toast"]["message"] == "Work example deleted."

    def test_item_requires_matching_section_type(self, auth_client):
        client, _ = auth_client
        client.get("/api/v1/dashboard")
        section_id = client.post("/api/v1/dashboard/sections", json={"type": "metric"}).get_json()["id"]

        response = client.post(
            f"/api/v1/dashboard/sections/{section_id}/testimonials",
            json={"new_name": "Sam", "new_quote": "Great"},
        )

        assert response.status_code == 400

    def test_missing_required_fields(self, auth_client):
        client, _ = auth_client
        client.get("/api/v1/dashboard")
        section_id = client.post("/api/v1/dashboard/sections", json={"type": "testimonial"}).get_json()["id"]

        response = client.post(f"/api/v1/dashboard/sections/{section_id}/testimonials", json={"new_name": "Sam"})

        assert response.get_json()["toast"]["message"] == "Testimonial quote is required."

    def test_other_owner_rows_are_not_found(self, auth_client, make_page, make_section, make_user):
        client, _ = auth_client
        foreign_page = make_page(user=make_user("sam@example.com"), slug="sam")
        foreign_section = make_section(foreign_page, "metric", 1)

        assert client.delete(f"/api/v1/dashboard/sections/{foreign_section.id}").status_code == 404
        assert client.post(
            f"/api/v1/dashboard/sections/{foreign_section.id}/move", json={"direction": "down"}
        ).status_code == 404
        assert db.session.get(ProofSection, foreign_section.id) is not None

    def test_move_at_edge_is_conflict(self, auth_client):
        client, _ = auth_client
        client.get("/api/v1/dashboard")
        section_id = client.post("/api/v1/dashboard/sections", json={"type": "metric"}).get_json()["id"]

        response = client.post(f"/api/v1/dashboard/sections/{section_id}/move", json={"direction": "up"})

        assert response.status_code == 409
        assert response.get_json()["toast"]["message"] == "Section is already at the edge."

    def test_upload_avatar_resets_thumbnail(self, auth_client, store):
        client, user = auth_client
        client.get("/api/v1/dashboard")
        section_id = client.post("/api/v1/dashboard/sections", json={"type": "testimonial"}).get_json()["id"]
        testimonial_id = client.post(
            f"/api/v1/dashboard/sections/{section_id}/testimonials",
            json={"new_name": "Sam", "new_quote": "Great"},
        ).get_json()["id"]

        response = client.post(
            f"/api/v1/dashboard/testimonials/{testimonial_id}/image",
            data={"file": (BytesIO(image_bytes()), "Sam Avatar.png")},
            content_type="multipart/form-data",
        )

        assert response.status_code == 201
        path = response.get_json()["path"]
        assert path.startswith(f"{user.id}/{_page_for(user).id}/")
        assert path.endswith("-sam-avatar.png")
        assert store.exists(path)


class TestTestimonialRequests:
    @pytest.fixture
    def pending_request(self, auth_client):
        client, user = auth_client
        client.get("/api/v1/dashboard")
        page = _page_for(user)

        item = request_models.TestimonialRequest()
        item.proof_page_id = page.id
        item.name = "Sam"
        item.role_company = "CTO, Acme"
        item.quote = "Alex shipped fast."
        db.session.add(item)
        db.session.commit()
        return client, page, item.id

    def test_list_pending(self, pending_request):
        client, _, request_id = pending_request

        body = client.get("/api/v1/dashboard/requests?status=pending").get_json()

        assert [item["id"] for item in body["items"]] == [request_id]
        assert body["pagination"] == {"has_more": False, "next_cursor": None}

    def test_cursor_walks_every_page(self, pending_request):
        client, page, _ = pending_request
        for index in range(4):
            item = request_models.TestimonialRequest()
            item.proof_page_id = page.id
            item.name = f"Visitor {index}"
            item.quote = "Lovely work."
            db.session.add(item)
            db.session.commit()

        seen = []
        url = "/api/v1/dashboard/requests?limit=2"
        while True:
            body = client.get(url).get_json()
            seen.extend(item["name"] for item in body["items"])
            cursor = body["pagination"]["next_cursor"]
            if not body["pagination"]["has_more"]:
                assert cursor is None
                break
            assert len(body["items"]) == 2
            url = f"/api/v1/dashboard/requests?limit=2&cursor={cursor}"

        assert seen == ["Visitor 3", "Visitor 2", "Visitor 1", "Visitor 0", "Sam"]

    def test_approve_creates_testimonial_section(self, pending_request):
        client, page, request_id = pending_request

        response = client.post(f"/api/v1/dashboard/requests/{request_id}/approve")

        assert response.get_json()["toast"]["message"] == "Testimonial request approved and added to your page."
        sections = ProofSection.query.filter_by(proof_page_id=page.id, type="testimonial").all()
        assert len(sections) == 1
        assert [t.name for t in sections[0].testimonials] == ["Sam"]

        again = client.post(f"/api/v1/dashboard/requests/{request_id}/approve")
        assert again.status_code == 400

    def test_reject(self, pending_request):
        client, _, request_id = pending_request

        client.post(f"/api/v1/dashboard/requests/{request_id}/reject")

        body = client.get("/api/v1/dashboard/requests?status=rejected").get_json()
        assert [item["id"] for item in body["items"]] == [request_id]

import pytest
from sqlalchemy.exc import OperationalError

from proofpage.application.dashboard.sections import create_section, delete_section, move_section
from proofpage.domain.exceptions import EdgeOfList, NotFound, PersistenceError, ValidationError
from proofpage.extensions import db
from proofpage.models.metric import Metric
from proofpage.models.section import ProofSection


def _positions(page_id):
    rows = (
        ProofSection.query
        .filter_by(proof_page_id=page_id)
        .order_by(ProofSection.position.asc())
        .all()
    )
    return [(row.id, row.position) for row in rows]


class FailingSession:
    """Delegates to the real session but fails the n-th statement."""

    def __init__(self, session, fail_on):
        self._session = session
        self._fail_on = fail_on
        self.calls = 0

    def execute(self, statement, *args, **kwargs):
        self.calls += 1
        if self.calls == self._fail_on:
            raise OperationalError(str(statement), {}, Exception("database is locked"))
        return self._session.execute(statement, *args, **kwargs)

    def __getattr__(self, name):
        return getattr(self._session, name)


@pytest.fixture
def three_sections(make_page, make_section):
    page = make_page()
    sections = [
        make_section(page, "testimonial", 1),
        make_section(page, "work_example", 2),
        make_section(page, "metric", 5),
    ]
    return page, [s.id for s in sections]


class TestMoveSection:
    def test_move_down_swaps_with_next(self, three_sections):
        page, (first, second, third) = three_sections

        result = move_section(owner_id=page.user_id, section_id=first, direction="down")

        assert result.message == "Section moved down."
        assert _positions(page.id) == [(second, 1), (first, 2), (third, 5)]

    def test_move_up_across_gap(self, three_sections):
        page, (first, second, third) = three_sections

        result = move_section(owner_id=page.user_id, section_id=third, direction="up")

        assert result.message == "Section moved up."
        assert _positions(page.id) == [(first, 1), (third, 2), (second, 5)]

    @pytest.mark.parametrize("index, direction", [(0, "up"), (2, "down")])
    def test_edge_leaves_positions_untouched(self, three_sections, index, direction):
        page, ids = three_sections
        before = _positions(page.id)

        with pytest.raises(EdgeOfList):
            move_section(owner_id=page.user_id, section_id=ids[index], direction=direction)

        assert _positions(page.id) == before

    def test_invalid_direction(self, three_sections):
        page, ids = three_sections
        with pytest.raises(ValidationError):
            move_section(owner_id=page.user_id, section_id=ids[0], direction="sideways")

    def test_positions_stay_unique(self, three_sections):
        page, ids = three_sections

        for direction in ("down", "down", "up"):
            try:
                move_section(owner_id=page.user_id, section_id=ids[0], direction=direction)
            except EdgeOfList:
                pass

        positions = [position for _, position in _positions(page.id)]
        assert len(positions) == len(set(positions)) == 3
        assert -1 not in positions

    def test_failed_step_keeps_earlier_writes(self, three_sections):
        page, (first, second, third) = three_sections
        session = FailingSession(db.session, fail_on=2)

        with pytest.raises(PersistenceError):
            move_section(owner_id=page.user_id, section_id=first, direction="down", session=session)

        db.session.expire_all()
        assert _positions(page.id) == [(first, -1), (second, 2), (third, 5)]

    def test_other_owner_gets_not_found(self, three_sections, make_user):
        _, ids = three_sections
        stranger = make_user("sam@example.com")

        with pytest.raises(NotFound):
            move_section(owner_id=stranger.id, section_id=ids[0], direction="down")


class TestCreateAndDeleteSection:
    def test_appends_after_max_position(self, three_sections):
        page, _ = three_sections

        result = create_section(page=page, section_type="metric")

        created = db.session.get(ProofSection, result.data["id"])
        assert created.position == 6

    def test_rejects_unknown_type(self, three_sections):
        page, _ = three_sections
        with pytest.raises(ValidationError):
            create_section(page=page, section_type="gallery")

    def test_delete_cascades_items(self, three_sections):
        page, ids = three_sections
        metric = Metric()
        metric.proof_section_id = ids[2]
        metric.label = "Clients"
        metric.value = "40+"
        db.session.add(metric)
        db.session.commit()
        metric_id = metric.id

        delete_section(owner_id=page.user_id, section_id=ids[2])

        assert db.session.get(ProofSection, ids[2]) is None
        assert db.session.get(Metric, metric_id) is None

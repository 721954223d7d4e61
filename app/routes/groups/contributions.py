import time

from flask import request, current_app
from flask_limiter.util import get_remote_address
from extensions import limiter
from models import db
from app.metrics import LEDGER_WAIT
from app.schemas.contribution import ContributionRequest, LedgerQuery
from app.services import dispatcher
from app.services.ledger import list_contributions, contributions_for_item, load_room_funding
from app.services.rooms import get_room, require_member
from app.utils import ok, role_required, transactional, validate_schema, validate_query, current_member
from . import groups_bp


def _wait_for_change(room_id, since, wait):
    """Hold the request until the room's ledger moves past ``since`` or ``wait`` runs out."""
    interval = current_app.config["LEDGER_POLL_INTERVAL"]
    started = time.monotonic()
    deadline = started + min(wait, current_app.config["LEDGER_LONGPOLL_MAX_WAIT"])
    room = get_room(room_id)
    while room.ledger_version <= since and time.monotonic() < deadline:
        time.sleep(interval)
        # End the read transaction so the next read sees other members' commits.
        db.session.rollback()
        room = get_room(room_id)
    LEDGER_WAIT.observe(time.monotonic() - started)
    return room


@groups_bp.route("/<int:room_id>/contributions", methods=["GET"])
@validate_query(LedgerQuery)
def get_contributions(room_id):
    query: LedgerQuery = request.validated_data
    room = get_room(room_id)
    require_member(room, current_member())
    if query.since is not None and query.wait > 0:
        room = _wait_for_change(room_id, query.since, query.wait)

    contributions = list_contributions(room.id)
    if query.item_id is not None:
        contributions = contributions_for_item(contributions, query.item_id)
    return ok({
        "version": room.ledger_version,
        "state": room.status,
        "pollInterval": current_app.config["LEDGER_POLL_INTERVAL"],
        "contributions": [c.to_dict() for c in contributions],
    })


@groups_bp.route("/<int:room_id>/funding", methods=["GET"])
def get_funding(room_id):
    room = get_room(room_id)
    require_member(room, current_member())
    funding = load_room_funding(room, tolerate_failure=True)
    data = funding.to_dict()
    data["version"] = room.ledger_version
    data["state"] = room.status
    return ok(data)


@groups_bp.route("/<int:room_id>/contributions", methods=["POST"])
@role_required(["member:contribute", "admin"])
@limiter.limit(
    lambda: current_app.config["CONTRIBUTION_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many contributions from this IP",
)
@validate_schema(ContributionRequest)
def create_contribution(room_id):
    data: ContributionRequest = request.validated_data
    with transactional("Contribution failed"):
        room = get_room(room_id, for_update=True)
        outcome, record = dispatcher.submit_contribution(
            room,
            data.cart_item_id,
            data.amount,
            data.payment_method,
            current_member(),
            transaction_id=data.transaction_id,
            card_token=data.card_token,
        )
    if outcome == "pending":
        return ok({"paymentSession": record.to_dict()}, message="Complete the payment to record your contribution", status=202)
    return ok({"contribution": record.to_dict(), "version": room.ledger_version, "state": room.status},
              message="Contribution added", status=201)

# backend/fitlog/routes/social_routes.py
from typing import List

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from sqlalchemy import or_

from .. import db
from ..enums import ActivityType, FriendshipStatus
from ..errors import Conflict, Forbidden, NotFound, ValidationError
from ..models.social import FriendActivity, Friendship, PrivacySettings
from ..models.user import User
from ..privacy import baseline_stats, filter_activity
from ..schemas import FriendRequestCreate, FriendshipAction, parse_body

friends_bp = Blueprint("friends", __name__)

FEED_DEFAULT_LIMIT = 20
FEED_MAX_LIMIT = 50
SEARCH_MIN_LENGTH = 2
SEARCH_MAX_RESULTS = 10

ACTIVITY_TITLES = {
    ActivityType.WORKOUT_COMPLETED: "Completed a workout",
    ActivityType.GYM_PLAN_STARTED: "Started a new gym plan",
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _get_friend_ids(current_user_id: int) -> List[int]:
    """Accepted friends, whichever side sent the request."""
    friendships = Friendship.query.filter(
        Friendship.status == FriendshipStatus.ACCEPTED,
        or_(
            Friendship.requester_id == current_user_id,
            Friendship.addressee_id == current_user_id,
        ),
    ).all()

    friend_ids = set()
    for f in friendships:
        if f.requester_id == current_user_id:
            friend_ids.add(f.addressee_id)
        else:
            friend_ids.add(f.requester_id)
    return sorted(friend_ids)


def _int_arg(name: str, default: int) -> int:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(details=[{"field": name, "message": "must be an integer"}]) from None


def _find_target(data: FriendRequestCreate):
    if data.user_id is not None:
        return db.session.get(User, data.user_id)
    identifier = data.identifier
    return User.query.filter(
        or_(
            User.username == identifier,
            User.name == identifier,
            User.email == identifier.lower(),
        )
    ).first()


def _get_friendship(friendship_id: int) -> Friendship:
    friendship = db.session.get(Friendship, friendship_id)
    if not friendship:
        raise NotFound("Friendship not found")
    return friendship


# ---------------------------------------------------------------------------
# Friends
# ---------------------------------------------------------------------------

@friends_bp.route("", methods=["GET"])
@jwt_required()
def get_friends():
    """
    Returns:
    {
      "friends": [
        {
          "id": 2,
          "name": "Alice",
          "username": "alice",
          "friendship_id": 7,
          "since": "2025-11-20T10:00:00",
          "stats": { "total_sets_completed": 120, "total_exercises": 30, "last_workout_date": "..." },
          "privacy_settings": { ... } | null
        },
        ...
      ]
    }
    """
    current_user_id = int(get_jwt_identity())

    friendships = (
        Friendship.query.filter(
            Friendship.status == FriendshipStatus.ACCEPTED,
            or_(
                Friendship.requester_id == current_user_id,
                Friendship.addressee_id == current_user_id,
            ),
        )
        .order_by(Friendship.created_at.asc())
        .all()
    )

    payload = []
    for f in friendships:
        friend = f.other_user(current_user_id)
        settings = friend.privacy_settings
        payload.append(
            {
                **friend.to_public_dict(),
                "friendship_id": f.id,
                "since": f.created_at.isoformat() if f.created_at else None,
                "stats": baseline_stats(friend.stats.to_dict() if friend.stats else None, settings),
                "privacy_settings": settings.to_dict() if settings else None,
            }
        )

    return jsonify({"friends": payload}), 200


@friends_bp.route("", methods=["POST"])
@jwt_required()
def send_friend_request():
    """
    Body:
    {
      "identifier": "alice"      # username, display name or email
      // OR "user_id": 2
    }
    """
    current_user_id = int(get_jwt_identity())
    data = parse_body(FriendRequestCreate)

    target = _find_target(data)
    if not target:
        raise NotFound("User not found")

    if target.id == current_user_id:
        raise ValidationError("Cannot send friend request to yourself")

    existing = Friendship.between(current_user_id, target.id)
    if existing:
        if existing.status == FriendshipStatus.ACCEPTED:
            raise Conflict("Already friends with this user")
        if existing.status == FriendshipStatus.PENDING:
            raise Conflict("Friend request already pending")
        if existing.status == FriendshipStatus.BLOCKED:
            raise Forbidden("Cannot send friend request to this user")
        if existing.status == FriendshipStatus.DECLINED:
            # one row per pair: a declined request is re-opened by whoever asks next
            existing.requester_id = current_user_id
            existing.addressee_id = target.id
            existing.status = FriendshipStatus.PENDING
            friendship = existing
    else:
        friendship = Friendship(
            requester_id=current_user_id,
            addressee_id=target.id,
            status=FriendshipStatus.PENDING,
        )
        db.session.add(friendship)

    db.session.commit()
    return jsonify({"message": "Friend request sent", "friendship": friendship.to_dict()}), 201


@friends_bp.route("/requests", methods=["GET"])
@jwt_required()
def get_friend_requests():
    current_user_id = int(get_jwt_identity())

    pending = (
        Friendship.query.filter(
            Friendship.status == FriendshipStatus.PENDING,
            or_(
                Friendship.requester_id == current_user_id,
                Friendship.addressee_id == current_user_id,
            ),
        )
        .order_by(Friendship.created_at.desc(), Friendship.id.desc())
        .all()
    )

    sent, received = [], []
    for f in pending:
        entry = {
            "id": f.id,
            "friend": f.other_user(current_user_id).to_public_dict(),
            "created_at": f.created_at.isoformat() if f.created_at else None,
        }
        (sent if f.requester_id == current_user_id else received).append(entry)

    return jsonify({"sent": sent, "received": received}), 200


@friends_bp.route("/search", methods=["GET"])
@jwt_required()
def search_users():
    """Query: ?q=ali  (at least 2 characters, matches username, name or email)"""
    current_user_id = int(get_jwt_identity())
    query = (request.args.get("q") or "").strip()

    if len(query) < SEARCH_MIN_LENGTH:
        raise ValidationError(
            details=[{"field": "q", "message": f"must be at least {SEARCH_MIN_LENGTH} characters"}]
        )

    pattern = f"%{query}%"
    users = (
        User.query.filter(
            User.id != current_user_id,
            or_(
                User.username.ilike(pattern),
                User.name.ilike(pattern),
                User.email.ilike(pattern),
            ),
        )
        .order_by(User.name.asc())
        .limit(SEARCH_MAX_RESULTS)
        .all()
    )

    results = []
    for u in users:
        friendship = Friendship.between(current_user_id, u.id)
        results.append(
            {
                **u.to_public_dict(),
                "friendship_status": friendship.status.value if friendship else None,
                "friendship_id": friendship.id if friendship else None,
            }
        )

    return jsonify({"users": results}), 200


@friends_bp.route("/<int:friendship_id>", methods=["PATCH"])
@jwt_required()
def respond_to_request(friendship_id: int):
    """Body: { "action": "accept" | "decline" }  (addressee only)"""
    current_user_id = int(get_jwt_identity())
    data = parse_body(FriendshipAction)
    friendship = _get_friendship(friendship_id)

    if friendship.addressee_id != current_user_id:
        raise Forbidden("Can only accept or decline requests sent to you")

    if friendship.status != FriendshipStatus.PENDING:
        raise ValidationError("Friend request is not pending")

    if data.action == "accept":
        friendship.status = FriendshipStatus.ACCEPTED
        PrivacySettings.get_or_create(friendship.requester_id)
        PrivacySettings.get_or_create(friendship.addressee_id)
    else:
        friendship.status = FriendshipStatus.DECLINED

    db.session.commit()
    return jsonify({"message": f"Friend request {data.action}ed", "friendship": friendship.to_dict()}), 200


@friends_bp.route("/<int:friendship_id>", methods=["DELETE"])
@jwt_required()
def remove_friendship(friendship_id: int):
    """Unfriend, cancel a sent request or clear a block."""
    current_user_id = int(get_jwt_identity())
    friendship = _get_friendship(friendship_id)

    if current_user_id not in (friendship.requester_id, friendship.addressee_id):
        raise Forbidden("Not part of this friendship")

    db.session.delete(friendship)
    db.session.commit()
    return jsonify({"message": "Friendship removed"}), 200


@friends_bp.route("/block/<int:user_id>", methods=["POST"])
@jwt_required()
def block_user(user_id: int):
    current_user_id = int(get_jwt_identity())

    if user_id == current_user_id:
        raise ValidationError("Cannot block yourself")
    if not db.session.get(User, user_id):
        raise NotFound("User not found")

    friendship = Friendship.between(current_user_id, user_id)
    if friendship:
        friendship.requester_id = current_user_id
        friendship.addressee_id = user_id
        friendship.status = FriendshipStatus.BLOCKED
    else:
        friendship = Friendship(
            requester_id=current_user_id,
            addressee_id=user_id,
            status=FriendshipStatus.BLOCKED,
        )
        db.session.add(friendship)

    db.session.commit()
    return jsonify({"message": "User blocked", "friendship": friendship.to_dict()}), 200


# ---------------------------------------------------------------------------
# Activity feed
# ---------------------------------------------------------------------------

@friends_bp.route("/feed", methods=["GET"])
@jwt_required()
def get_feed():
    """
    Query: ?limit=20&offset=0

    Returns:
    {
      "activities": [
        {
          "id": 123,
          "type": "WORKOUT_COMPLETED",
          "title": "Completed a workout",
          "data": { ...redacted by the owner's privacy settings... },
          "created_at": "2025-11-21T12:34:56",
          "user": { "id": 2, "name": "Alice", "username": "alice" }
        }
      ],
      "has_more": false
    }
    """
    current_user_id = int(get_jwt_identity())
    limit = max(1, min(_int_arg("limit", FEED_DEFAULT_LIMIT), FEED_MAX_LIMIT))
    offset = max(0, _int_arg("offset", 0))

    friend_ids = _get_friend_ids(current_user_id)
    if not friend_ids:
        return jsonify({"activities": [], "has_more": False}), 200

    rows = (
        FriendActivity.query.filter(FriendActivity.user_id.in_(friend_ids))
        .order_by(FriendActivity.created_at.desc(), FriendActivity.id.desc())
        .offset(offset)
        .limit(limit + 1)
        .all()
    )
    has_more = len(rows) > limit

    activities = []
    for a in rows[:limit]:
        activities.append(
            {
                "id": a.id,
                "type": a.activity_type.value,
                "title": ACTIVITY_TITLES[a.activity_type],
                "data": filter_activity(a.data, a.user.privacy_settings),
                "created_at": a.created_at.isoformat() if a.created_at else None,
                "user": a.user.to_public_dict(),
            }
        )

    return jsonify({"activities": activities, "has_more": has_more}), 200

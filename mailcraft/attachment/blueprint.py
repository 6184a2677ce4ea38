"""HTTP action for attaching files to messages."""

import logging

from flask import Blueprint, jsonify, make_response, request

from mailcraft.attachment.constants import ContractViolation
from mailcraft.attachment.core import AttachmentAttacher, AttachRequest
from mailcraft.attachment.result import ErrorKind
from mailcraft.auth import ADVANCED_USERS_ROLE, USERS_ROLE, AuthorizationGate

logger = logging.getLogger(__name__)

# Action id the authoring UI dispatches to this endpoint
ADD_ATTACHMENT_ACTION = "EXM.AddAttachment"


def create_attachment_blueprint(
    attacher: AttachmentAttacher,
    gate: AuthorizationGate | None = None,
) -> Blueprint:
    attachments = Blueprint("attachments", __name__, url_prefix="/api/attachments")
    gate = gate or AuthorizationGate(ADVANCED_USERS_ROLE, USERS_ROLE)

    @attachments.errorhandler(ContractViolation)
    def handle_contract_violation(error: ContractViolation):
        logger.error("Rejected malformed %s request: %s", ADD_ATTACHMENT_ACTION, error)
        return make_response(
            jsonify(
                {
                    "error": True,
                    "errorMessage": str(error),
                    "errorKind": ErrorKind.CONTRACT_VIOLATION.value,
                    "notificationMessages": [],
                }
            ),
            400,
        )

    @attachments.route("/add", methods=["POST"])
    @gate
    def add_attachment():
        attach_request = AttachRequest.from_payload(request.get_json(silent=True))
        result = attacher.attach(attach_request)
        return jsonify(result.to_response())

    return attachments

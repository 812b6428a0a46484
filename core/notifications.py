# core/notifications.py
"""
Message builders for workflow notifications.

Each builder returns a plain-text and a minimal HTML body; templating and
delivery belong to the notification sender.
"""
from dataclasses import dataclass
from html import escape
from typing import Any


@dataclass(frozen=True)
class Message:
    to: str
    subject: str
    text_body: str
    html_body: str
    cc: str | None = None


def _asset_label(asset: dict[str, Any] | None, tag: str) -> str:
    if not asset:
        return tag
    description = " ".join(p for p in (asset.get("brand"), asset.get("model")) if p)
    return f"{tag} ({description})" if description else tag


def _build(to: str, subject: str, lines: list[str], cc: str | None = None) -> Message:
    text_body = "\n".join(lines)
    html_body = "".join(f"<p>{escape(line)}</p>" for line in lines if line)
    return Message(to=to, subject=subject, text_body=text_body, html_body=html_body, cc=cc)


# ---------- Accountability ----------

def assignment_request(form: dict[str, Any], asset: dict[str, Any] | None) -> Message:
    label = _asset_label(asset, form["asset_tag"])
    return _build(
        form["employee_email"],
        f"Asset Accountability Confirmation Required - {form['asset_tag']}",
        [
            f"Hello {form.get('employee_name') or form['employee_email']},",
            f"Asset {label} has been assigned to you by {form.get('it_personnel', '')}.",
            f"Please review and sign accountability form {form['form_id']} to confirm receipt.",
        ],
    )


def confirmation_receipt(
    form: dict[str, Any],
    asset: dict[str, Any] | None,
    cc: str | None = None,
) -> Message:
    label = _asset_label(asset, form["asset_tag"])
    lines = [
        f"Hello {form.get('employee_name') or form['employee_email']},",
        f"Your acceptance of asset {label} has been recorded (form {form['form_id']}).",
    ]
    if form.get("document_ref"):
        lines.append(f"Accountability document: {form['document_ref']}")
    return _build(
        form["employee_email"],
        f"Asset Accountability Confirmed - {form['asset_tag']}",
        lines,
        cc=cc,
    )


def return_receipt(
    form: dict[str, Any],
    asset: dict[str, Any] | None,
    cc: str | None = None,
) -> Message:
    label = _asset_label(asset, form["asset_tag"])
    lines = [
        f"Hello {form.get('employee_name') or form['employee_email']},",
        f"Asset {label} has been returned and released from your accountability.",
        f"Form {form['form_id']} is now closed.",
    ]
    if form.get("document_ref"):
        lines.append(f"Return document: {form['document_ref']}")
    return _build(
        form["employee_email"],
        f"Asset Return Processed - {form['asset_tag']}",
        lines,
        cc=cc,
    )


# ---------- Disposal ----------

def approval_request(disposal: dict[str, Any], asset: dict[str, Any] | None) -> Message:
    label = _asset_label(asset, disposal["asset_tag"])
    return _build(
        disposal["approver_email"],
        f"Disposal Approval Required - {disposal['asset_tag']}",
        [
            f"Hello {disposal.get('approver_name') or disposal['approver_email']},",
            f"{disposal.get('requested_by', '')} requests disposal of asset {label}.",
            f"Method: {disposal.get('method', '')}",
            f"Reason: {disposal.get('reason', '')}",
            f"Please approve or reject request {disposal['disposal_id']}.",
        ],
    )


def disposal_status(disposal: dict[str, Any], asset: dict[str, Any] | None) -> Message:
    label = _asset_label(asset, disposal["asset_tag"])
    lines = [
        f"Disposal request {disposal['disposal_id']} for asset {label} was "
        f"{disposal['status'].lower()} by {disposal.get('approver_name', '')}.",
    ]
    if disposal.get("document_ref"):
        lines.append(f"Disposal certificate: {disposal['document_ref']}")
    return _build(
        disposal.get("requester_email", ""),
        f"Disposal {disposal['status']} - {disposal['asset_tag']}",
        lines,
    )


def disposal_cancelled(disposal: dict[str, Any], reason: str) -> Message:
    return _build(
        disposal["approver_email"],
        f"Disposal Request Cancelled - {disposal['asset_tag']}",
        [
            f"Disposal request {disposal['disposal_id']} has been cancelled.",
            f"Reason: {reason}" if reason else "",
        ],
    )

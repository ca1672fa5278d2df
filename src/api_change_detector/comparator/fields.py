"""
Field-level comparators for REST endpoints.

Compare parameters, request bodies and responses of a matched endpoint
pair and classify every difference.
"""

from typing import Optional

from api_change_detector.comparator.diffing import diff_keyed, make_change
from api_change_detector.models.change import Change, ChangeCategory, ChangeType, Severity
from api_change_detector.models.spec import Parameter, RequestBody, Response


def parameter_path(owner: str, name: str) -> str:
    """Locator of a parameter within its endpoint."""
    return f"{owner} parameter:{name}".strip()


def response_path(owner: str, status_code: str) -> str:
    """Locator of a response within its endpoint."""
    return f"{owner} response:{status_code}".strip()


def compare_parameters(
    old_params: list[Parameter],
    new_params: list[Parameter],
    owner: str = "",
) -> list[Change]:
    """
    Compare the parameter lists of two endpoint versions.

    Parameters are matched by name.

    Args:
        old_params: Parameters of the old endpoint.
        new_params: Parameters of the new endpoint.
        owner: Locator of the owning endpoint, used as path prefix.

    Returns:
        Detected parameter changes.
    """

    def added(param: Parameter) -> list[Change]:
        if param.required:
            severity = Severity.BREAKING
            description = f"Required parameter '{param.name}' added"
        else:
            severity = Severity.INFO
            description = f"Optional parameter '{param.name}' added"
        return [
            make_change(
                ChangeType.ADDED,
                ChangeCategory.PARAMETER,
                severity,
                parameter_path(owner, param.name),
                description,
                new_value=param.model_dump(mode="json"),
            )
        ]

    def removed(param: Parameter) -> list[Change]:
        return [
            make_change(
                ChangeType.REMOVED,
                ChangeCategory.PARAMETER,
                Severity.DANGEROUS,
                parameter_path(owner, param.name),
                f"Parameter '{param.name}' removed",
                old_value=param.model_dump(mode="json"),
            )
        ]

    return diff_keyed(
        old_params,
        new_params,
        key=lambda p: p.name,
        on_added=added,
        on_removed=removed,
        on_matched=lambda old, new: compare_parameter(old, new, owner),
    )


def compare_parameter(old: Parameter, new: Parameter, owner: str = "") -> list[Change]:
    """Compare two versions of the same parameter."""
    changes: list[Change] = []
    path = parameter_path(owner, new.name)

    if old.type != new.type:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.PARAMETER,
                Severity.BREAKING,
                f"{path}.type",
                f"Parameter '{new.name}' type changed from {old.type} to {new.type}",
                old_value=old.type,
                new_value=new.type,
            )
        )

    if not old.required and new.required:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.PARAMETER,
                Severity.BREAKING,
                f"{path}.required",
                f"Parameter '{new.name}' changed from optional to required",
                old_value=False,
                new_value=True,
            )
        )
    elif old.required and not new.required:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.PARAMETER,
                Severity.INFO,
                f"{path}.required",
                f"Parameter '{new.name}' changed from required to optional",
                old_value=True,
                new_value=False,
            )
        )

    if old.location != new.location:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.PARAMETER,
                Severity.BREAKING,
                f"{path}.location",
                f"Parameter '{new.name}' location changed from "
                f"{old.location.value} to {new.location.value}",
                old_value=old.location.value,
                new_value=new.location.value,
            )
        )

    return changes


def compare_request_body(
    old: Optional[RequestBody],
    new: Optional[RequestBody],
    owner: str = "",
) -> list[Change]:
    """
    Compare the request bodies of two endpoint versions.

    Args:
        old: Request body of the old endpoint, if any.
        new: Request body of the new endpoint, if any.
        owner: Locator of the owning endpoint, used as path prefix.

    Returns:
        Detected request body changes.
    """
    path = f"{owner}.requestBody" if owner else "requestBody"

    if old is None and new is None:
        return []

    if old is None:
        if new.required:
            severity, description = Severity.BREAKING, "Required request body added"
        else:
            severity, description = Severity.INFO, "Optional request body added"
        return [
            make_change(
                ChangeType.ADDED,
                ChangeCategory.REQUEST_BODY,
                severity,
                path,
                description,
                new_value=new.model_dump(mode="json"),
            )
        ]

    if new is None:
        return [
            make_change(
                ChangeType.REMOVED,
                ChangeCategory.REQUEST_BODY,
                Severity.DANGEROUS,
                path,
                "Request body removed",
                old_value=old.model_dump(mode="json"),
            )
        ]

    changes: list[Change] = []

    if not old.required and new.required:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.REQUEST_BODY,
                Severity.BREAKING,
                f"{path}.required",
                "Request body changed from optional to required",
                old_value=False,
                new_value=True,
            )
        )
    elif old.required and not new.required:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.REQUEST_BODY,
                Severity.INFO,
                f"{path}.required",
                "Request body changed from required to optional",
                old_value=True,
                new_value=False,
            )
        )

    if old.schema_ref != new.schema_ref:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.REQUEST_BODY,
                Severity.DANGEROUS,
                f"{path}.schema",
                f"Request body schema changed from {old.schema_ref} to {new.schema_ref}",
                old_value=old.schema_ref,
                new_value=new.schema_ref,
            )
        )

    if old.content_type != new.content_type:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.REQUEST_BODY,
                Severity.WARNING,
                f"{path}.contentType",
                f"Request body content type changed from {old.content_type} "
                f"to {new.content_type}",
                old_value=old.content_type,
                new_value=new.content_type,
            )
        )

    return changes


def compare_responses(
    old_responses: list[Response],
    new_responses: list[Response],
    owner: str = "",
) -> list[Change]:
    """
    Compare the response lists of two endpoint versions.

    Responses are matched by status code.
    """

    def added(response: Response) -> list[Change]:
        return [
            make_change(
                ChangeType.ADDED,
                ChangeCategory.RESPONSE,
                Severity.INFO,
                response_path(owner, response.status_code),
                f"Response {response.status_code} added",
                new_value=response.model_dump(mode="json"),
            )
        ]

    def removed(response: Response) -> list[Change]:
        return [
            make_change(
                ChangeType.REMOVED,
                ChangeCategory.RESPONSE,
                Severity.DANGEROUS,
                response_path(owner, response.status_code),
                f"Response {response.status_code} removed",
                old_value=response.model_dump(mode="json"),
            )
        ]

    return diff_keyed(
        old_responses,
        new_responses,
        key=lambda r: r.status_code,
        on_added=added,
        on_removed=removed,
        on_matched=lambda old, new: compare_response(old, new, owner),
    )


def compare_response(old: Response, new: Response, owner: str = "") -> list[Change]:
    """Compare two versions of the same response."""
    changes: list[Change] = []
    path = response_path(owner, new.status_code)

    if old.schema_ref != new.schema_ref:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.RESPONSE,
                Severity.DANGEROUS,
                f"{path}.schema",
                f"Response {new.status_code} schema changed from {old.schema_ref} "
                f"to {new.schema_ref}",
                old_value=old.schema_ref,
                new_value=new.schema_ref,
            )
        )

    if old.content_type != new.content_type:
        changes.append(
            make_change(
                ChangeType.MODIFIED,
                ChangeCategory.RESPONSE,
                Severity.WARNING,
                f"{path}.contentType",
                f"Response {new.status_code} content type changed from "
                f"{old.content_type} to {new.content_type}",
                old_value=old.content_type,
                new_value=new.content_type,
            )
        )

    return changes

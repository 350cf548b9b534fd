from datetime import datetime, timezone

import pytest

from threescale_client.exceptions import UnexpectedResponseError
from threescale_client.parsing import parse_authorize, parse_report_error, parse_timestamp

SUCCESS_BODY = """<status>
  <authorized>true</authorized>
  <plan>Ultimate</plan>
  <usage_reports>
    <usage_report metric="hits" period="day">
      <period_start>2010-04-26 00:00:00 +0000</period_start>
      <period_end>2010-04-27 00:00:00 +0000</period_end>
      <current_value>10023</current_value>
      <max_value>50000</max_value>
    </usage_report>
    <usage_report metric="hits" period="month">
      <period_start>2010-04-01 00:00:00 +0000</period_start>
      <period_end>2010-05-01 00:00:00 +0000</period_end>
      <current_value>999872</current_value>
      <max_value>150000</max_value>
    </usage_report>
  </usage_reports>
</status>"""

OAUTH_BODY = """<status>
  <authorized>true</authorized>
  <application>
    <id>94bd2de3</id>
    <key>883bdb8dbc3b6b77dbcf26845560fdbb</key>
    <redirect_url>http://localhost:8080/oauth/oauth_redirect</redirect_url>
  </application>
  <plan>Ultimate</plan>
</status>"""


def test_parse_timestamp_returns_aware_utc():
    parsed = parse_timestamp("2010-04-26 00:00:00 +0000")

    assert parsed == datetime(2010, 4, 26, tzinfo=timezone.utc)
    assert parsed.tzinfo is timezone.utc


def test_parse_timestamp_normalizes_offsets():
    assert parse_timestamp("2010-04-26 02:00:00 +0200") == datetime(
        2010, 4, 26, tzinfo=timezone.utc
    )


def test_parse_timestamp_rejects_other_formats():
    with pytest.raises(UnexpectedResponseError):
        parse_timestamp("2010-04-26T00:00:00Z")


def test_parse_status_with_usage_reports():
    response = parse_authorize(SUCCESS_BODY)

    assert response.success is True
    assert response.plan == "Ultimate"
    assert len(response.usage_reports) == 2
    day, month = response.usage_reports
    assert day.metric == "hits"
    assert day.period == "day"
    assert day.period_start == datetime(2010, 4, 26, tzinfo=timezone.utc)
    assert day.period_end == datetime(2010, 4, 27, tzinfo=timezone.utc)
    assert day.current_value == 10023
    assert day.max_value == 50000
    assert day.exceeded is False
    assert month.period == "month"
    assert month.period_end == datetime(2010, 5, 1, tzinfo=timezone.utc)
    assert response.find_usage_report("hits", "month") is month
    assert response.find_usage_report("hits", "year") is None
    assert response.has_exceeded is False


def test_parse_status_without_optional_blocks():
    response = parse_authorize("<status><authorized>true</authorized></status>")

    assert response.success is True
    assert response.plan is None
    assert response.usage_reports == ()
    assert response.error_message is None


def test_parse_application_block():
    response = parse_authorize(OAUTH_BODY, oauth=True)

    assert response.app_id == "94bd2de3"
    assert response.app_key == "883bdb8dbc3b6b77dbcf26845560fdbb"
    assert response.redirect_url == "http://localhost:8080/oauth/oauth_redirect"


def test_oauth_flow_reads_success_from_root_shape():
    body = "<status><authorized>false</authorized><reason>usage limits are exceeded</reason></status>"

    assert parse_authorize(body).success is False
    oauth_response = parse_authorize(body, oauth=True)
    assert oauth_response.success is True
    assert oauth_response.error_message == "usage limits are exceeded"


def test_parse_error_root():
    body = '<error code="application_not_found">application with id="foo" was not found</error>'

    response = parse_authorize(body)

    assert response.success is False
    assert response.error_code == "application_not_found"
    assert response.error_message == 'application with id="foo" was not found'


def test_parse_report_error():
    body = '<error code="provider_key_invalid">provider key "foo" is invalid</error>'

    response = parse_report_error(body)

    assert response.success is False
    assert response.error_code == "provider_key_invalid"
    assert response.error_message == 'provider key "foo" is invalid'


@pytest.mark.parametrize(
    "body",
    [
        "",
        "OMG! WTF!",
        "<status><authorized>true</authorized>",
        "<result>ok</result>",
        "<status><plan>Ultimate</plan></status>",
        "<status><authorized>maybe</authorized></status>",
        "<error>no code attribute</error>",
        (
            "<status><authorized>true</authorized><usage_reports>"
            '<usage_report metric="hits" period="day">'
            "<period_start>2010-04-26 00:00:00 +0000</period_start>"
            "<period_end>2010-04-27 00:00:00 +0000</period_end>"
            "<current_value>lots</current_value><max_value>5</max_value>"
            "</usage_report></usage_reports></status>"
        ),
        (
            "<status><authorized>true</authorized><usage_reports>"
            '<usage_report metric="hits" period="day">'
            "<period_start>2010-04-26 00:00:00 +0000</period_start>"
            "</usage_report></usage_reports></status>"
        ),
    ],
)
def test_malformed_documents_raise(body):
    with pytest.raises(UnexpectedResponseError) as excinfo:
        parse_authorize(body)

    assert excinfo.value.details == body


def test_report_error_requires_error_root():
    with pytest.raises(UnexpectedResponseError):
        parse_report_error("<status><authorized>true</authorized></status>")


def test_unclosed_usage_reports_is_rejected_even_in_oauth_flow():
    body = (
        "<status><authorized>false</authorized>"
        "<reason>usage limits are exceeded</reason>"
        "<usage_reports>"
        '<usage_report metric="hits" period="day" exceeded="true">'
        "<period_start>2010-04-26 00:00:00 +0000</period_start>"
        "<period_end>2010-04-27 00:00:00 +0000</period_end>"
        "<current_value>50002</current_value><max_value>50000</max_value>"
        "</usage_report>"
        "/usage_reports>"
        "</status>"
    )

    with pytest.raises(UnexpectedResponseError):
        parse_authorize(body, oauth=True)

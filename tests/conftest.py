import pytest


def event_list_html(n=10, badge=False):
    items = []
    for i in range(1, n + 1):
        extra = '<span class="badge">new</span>' if badge else ''
        items.append(
            f'<li class="item"><a href="/e/{i}">Event {i}</a>'
            f'<span class="info">link</span>{extra}</li>'
        )
    return (
        '<html><head><title>Events</title></head><body>'
        f'<ul class="events">{"".join(items)}</ul>'
        '</body></html>'
    )


def nested_days_html(days=4, events=3):
    out = []
    for d in range(1, days + 1):
        evs = "".join(
            f'<div class="event"><span class="title">Title {d}-{j}</span>'
            f'<a href="/e/{d}-{j}">Details</a></div>'
            for j in range(1, events + 1)
        )
        out.append(f'<div class="day"><h2 class="date">Day {d}</h2>{evs}</div>')
    return f'<html><body><div class="days">{"".join(out)}</div></body></html>'


@pytest.fixture
def event_list():
    return event_list_html()


@pytest.fixture
def nested_days():
    return nested_days_html()

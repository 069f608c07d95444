from trayex.client.render import render_ascii, render_svg


def test_render_ascii_produces_block_art(pass_service):
    art = render_ascii(pass_service.mint("user-1"))
    lines = art.splitlines()
    assert len(lines) > 10
    assert len(set(len(line) for line in lines if line)) == 1


def test_render_svg_is_svg_document(pass_service):
    svg = render_svg(pass_service.mint("user-1"))
    assert b"<svg" in svg

from pointgen.parser import parse_raw_details
from pointgen.records import ParameterRecord
from pointgen.serializer import LINE_PREFIX, render_point_file, render_record


def test_render_bit_field_records():
    records = parse_raw_details("Status Word\n100 Integer Bits 0: Ready; Bits 1-2: Mode")
    assert render_point_file(records) == (
        ':SAFRAN_X:PNT: DI:100:READY_1:"Ready [Bits 0]":grp "Status Word":\n'
        ':SAFRAN_X:PNT: DI:100:MODE_2:"Mode [Bits 1-2]":grp "Status Word":'
    )


def test_render_value_mapping_record():
    records = parse_raw_details("Config\n200 Word Speed 0: Slow 1: Fast")
    assert render_record(records[0]) == (
        ':SAFRAN_X:PNT: Word:200:SPEED:"Speed":grp "Config":evt "Slow"==0,0:"Fast"==1,0:'
    )


def test_render_includes_bnd_before_evt():
    record = ParameterRecord(
        offset="5",
        type="AI",
        id="5",
        tag="LEVEL",
        label="Level",
        group="Tank",
        bnd="0,100",
        evt='"Low"==0,0',
    )
    assert render_record(record) == (
        ':SAFRAN_X:PNT: AI:5:LEVEL:"Level":grp "Tank":bnd 0,100:evt "Low"==0,0:'
    )


def test_every_line_has_prefix_and_trailing_colon():
    text = "G\n1 Word A 0: x\n2 Integer Bits 3: y\n3 Real Z"
    for line in render_point_file(parse_raw_details(text)).split("\n"):
        assert line.startswith(LINE_PREFIX)
        assert line.endswith(":")
    lines = render_point_file(parse_raw_details(text)).split("\n")
    assert ":evt " in lines[0] and "[Bits" not in lines[0]
    assert "[Bits 3]" in lines[1] and ":evt " not in lines[1]
    assert ":evt " not in lines[2] and "[Bits" not in lines[2]


def test_empty_record_set_renders_empty_text():
    assert render_point_file([]) == ""

import numpy as np
import pytest

from dynamicnets.interaction_logs import (load_direct_log,
                                          load_indirect_log,
                                          load_interaction_log,
                                          InteractionLogError)


def write_log(tmp_path, lines, name='interactions.txt'):
    path = tmp_path / name
    path.write_text("\n".join(lines) + "\n")
    return str(path)


def test_direct_log(tmp_path):
    filename = write_log(tmp_path, ["1\t2\t10.0\t10.5",
                                    "2\t3\t11.0\t12.0",
                                    "1\t2\t20.0\t20.0"])
    index = load_direct_log(filename, 3)

    assert index.symmetric
    np.testing.assert_array_equal(index.records(0, 1), [[10.0, 10.5], [20.0, 20.0]])
    np.testing.assert_array_equal(index.records(1, 0), index.records(0, 1))
    np.testing.assert_array_equal(index.records(2, 1), [[11.0, 12.0]])
    assert index.get_record_count(0, 2) == 0

def test_direct_log_skips_blank_and_comment_lines(tmp_path):
    filename = write_log(tmp_path, ["# from\tto\tfrom_time\tto_time",
                                    "",
                                    "1\t2\t10.0\t10.0"])
    index = load_direct_log(filename, 2)
    assert index.get_record_count() == 2

def test_indirect_log(tmp_path):
    filename = write_log(tmp_path, ["nest\t5.0\t1\tNA\t3.0\tNA",
                                    "nest\t6.0\t3\t1.0\t4.5\tNA"])
    index = load_indirect_log(filename, 3)

    assert not index.symmetric
    np.testing.assert_array_equal(index.records(0, 1), [[5.0, 3.0]])
    np.testing.assert_array_equal(index.records(2, 0), [[6.0, 1.0]])
    np.testing.assert_array_equal(index.records(2, 1), [[6.0, 4.5]])
    assert index.get_record_count(1, 0) == 0
    assert index.get_record_count(0, 0) == 0
    assert index.get_record_count() == 3

def test_indirect_log_missing_columns_produce_no_record(tmp_path):
    filename = write_log(tmp_path, ["nest\t5.0\t2\tNA\tNA"])
    index = load_indirect_log(filename, 2)
    assert index.get_record_count() == 0

def test_load_interaction_log_dispatch(tmp_path):
    filename = write_log(tmp_path, ["1\t2\t1.0\t1.0"])
    assert load_interaction_log(filename, 2, 'direct').get_record_count() == 2

    with pytest.raises(ValueError):
        load_interaction_log(filename, 2, 'sideways')

def test_unreadable_file_raises(tmp_path):
    missing = str(tmp_path / 'missing.txt')
    with pytest.raises(InteractionLogError) as excinfo:
        load_direct_log(missing, 3)
    assert excinfo.value.filename == missing
    assert isinstance(excinfo.value.__cause__, OSError)

def test_malformed_time_raises_with_location(tmp_path):
    filename = write_log(tmp_path, ["1\t2\t10.0\t10.0",
                                    "1\t2\tten\t10.0"])
    with pytest.raises(InteractionLogError) as excinfo:
        load_direct_log(filename, 2)
    assert excinfo.value.row == 2
    assert excinfo.value.column == 3
    assert "row 2, column 3" in str(excinfo.value)

def test_malformed_node_raises(tmp_path):
    filename = write_log(tmp_path, ["x\t2\t10.0\t10.0"])
    with pytest.raises(InteractionLogError) as excinfo:
        load_direct_log(filename, 2)
    assert excinfo.value.column == 1

def test_node_out_of_range_raises(tmp_path):
    filename = write_log(tmp_path, ["1\t3\t10.0\t10.0"])
    with pytest.raises(InteractionLogError) as excinfo:
        load_direct_log(filename, 2)
    assert excinfo.value.column == 2

    filename = write_log(tmp_path, ["0\t1\t10.0\t10.0"], name='zero.txt')
    with pytest.raises(InteractionLogError):
        load_direct_log(filename, 2)

def test_short_lines_raise(tmp_path):
    filename = write_log(tmp_path, ["1\t2\t10.0"])
    with pytest.raises(InteractionLogError):
        load_direct_log(filename, 2)

    filename = write_log(tmp_path, ["nest\t5.0\t1\tNA"], name='indirect.txt')
    with pytest.raises(InteractionLogError):
        load_indirect_log(filename, 2)

def test_malformed_indirect_column_raises(tmp_path):
    filename = write_log(tmp_path, ["nest\t5.0\t1\tNA\tsoon"])
    with pytest.raises(InteractionLogError) as excinfo:
        load_indirect_log(filename, 2)
    assert excinfo.value.column == 5

def test_verbose_summary(tmp_path, capsys):
    filename = write_log(tmp_path, ["1\t2\t1.0\t1.0",
                                    "1\t2\t3.0\t3.0"])
    load_direct_log(filename, 3, verbose=True)

    out = capsys.readouterr().out
    assert "loaded 4 records over 2 cells" in out
    assert "1 contact pairs, mean degree 0.67, 1 isolated nodes" in out

def test_verbose_summary_of_indirect_log(tmp_path, capsys):
    filename = write_log(tmp_path, ["nest\t5.0\t1\tNA\t3.0",
                                    "nest\t6.0\t2\t1.0\tNA"])
    load_indirect_log(filename, 2, verbose=True)

    out = capsys.readouterr().out
    assert "loaded 2 records over 2 cells" in out
    assert "2 contact pairs, mean degree 2.00, 0 isolated nodes" in out

def test_rows_count_data_lines_only(tmp_path):
    filename = write_log(tmp_path, ["# from\tto\tfrom_time\tto_time",
                                    "1\t2\t10.0\t10.0",
                                    "",
                                    "1\t2\t11.0\tlater"])
    with pytest.raises(InteractionLogError) as excinfo:
        load_direct_log(filename, 2)
    assert excinfo.value.row == 2
    assert excinfo.value.column == 4

def test_extra_columns_are_ignored(tmp_path):
    filename = write_log(tmp_path, ["1\t2\t10.0\t10.5\tcorridor",
                                    "2\t1\t12.0\t12.0"])
    index = load_direct_log(filename, 2)
    np.testing.assert_array_equal(index.records(0, 1), [[10.0, 10.5], [12.0, 12.0]])

def test_non_finite_time_raises(tmp_path):
    filename = write_log(tmp_path, ["1\t2\t10.0\t10.0",
                                    "1\t2\t11.0\tinf"])
    with pytest.raises(InteractionLogError) as excinfo:
        load_direct_log(filename, 2)
    assert excinfo.value.row == 2
    assert excinfo.value.column == 4

def test_empty_log_has_no_records(tmp_path):
    filename = write_log(tmp_path, ["# no crossings recorded"])
    index = load_direct_log(filename, 3)
    assert index.get_record_count() == 0
    assert index.pairs() == []

def test_unsorted_indirect_log_raises(tmp_path):
    filename = write_log(tmp_path, ["nest\t10.0\t1\tNA\t9.0",
                                    "nest\t5.0\t1\tNA\t4.0"])
    with pytest.raises(InteractionLogError) as excinfo:
        load_indirect_log(filename, 2)
    assert "not sorted" in str(excinfo.value)
    assert excinfo.value.filename == filename

def test_indirect_log_sorted_per_cell(tmp_path):
    # rows out of order overall are fine as long as every cell is ascending
    filename = write_log(tmp_path, ["nest\t10.0\t1\tNA\t9.0",
                                    "nest\t5.0\t2\t4.0\tNA"])
    index = load_indirect_log(filename, 2)
    assert index.get_record_count() == 2

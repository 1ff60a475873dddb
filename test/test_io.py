from __future__ import print_function
import pytest


def test_read_tree_string():
    from phylostats import read_tree
    tree = read_tree("((a:1,b:1):1,c:2);")
    assert [t.name for t in tree.get_terminals()] == ['a', 'b', 'c']
    assert all(isinstance(n.branch_length, float) for n in tree.find_clades())


def test_read_tree_missing_branch_lengths():
    from phylostats import read_tree
    tree = read_tree("((a,b),c);")
    assert all(n.branch_length == 0.0 for n in tree.find_clades())


def test_read_tree_errors():
    from phylostats import read_tree, MissingDataError
    with pytest.raises(MissingDataError):
        read_tree("this_file_does_not_exist.nwk")
    with pytest.raises(MissingDataError):
        read_tree("(a:1);")


def test_tree_file_round_trip(tmp_path):
    from phylostats import read_tree, write_tree
    nwk = "(((t1:0.123456789012,t2:0.987654321098):0.314159265359,t3:3e-10):1.000000000001,(t4:2.5,t5:1e-12):0.5);"
    tree = read_tree(nwk)
    lengths = [n.branch_length for n in tree.find_clades()]
    for fmt, suffix in [('newick', 'nwk'), ('nexus', 'nex')]:
        fname = str(tmp_path/('tree.'+suffix))
        write_tree(tree, fname, fmt=fmt)
        tree2 = read_tree(fname)
        assert [t.name for t in tree2.get_terminals()] == ['t1', 't2', 't3', 't4', 't5']
        for bl1, bl2 in zip(lengths, [n.branch_length for n in tree2.find_clades()]):
            assert bl2 == pytest.approx(bl1, rel=1e-12, abs=0)
        # very short branches survive
        assert tree2.find_any(name='t3').branch_length > 0
        assert tree2.find_any(name='t5').branch_length > 0


def test_tree_to_newick():
    from phylostats import read_tree
    from phylostats.io import tree_to_newick
    tree = read_tree("((a:0.123456789,b:0.987654321):0.314159265,c:1.2);")
    tree2 = read_tree(tree_to_newick(tree))
    assert [n.branch_length for n in tree2.find_clades()] == [n.branch_length for n in tree.find_clades()]


def test_read_traits_name_column(tmp_path):
    from phylostats import read_traits
    fname = str(tmp_path/'traits.csv')
    with open(fname, 'w') as fh:
        fh.write("mass,species,length\n1.2,a,3\n0.4,b,2\n2.2,c,1\n")
    df = read_traits(fname)
    assert df.index.name == 'species'
    assert list(df.index) == ['a', 'b', 'c']
    assert list(df.columns) == ['mass', 'length']


def test_read_traits_tsv_and_numeric_names(tmp_path):
    from phylostats import read_traits, MissingDataError
    fname = str(tmp_path/'traits.tsv')
    with open(fname, 'w') as fh:
        fh.write("id\tmass\n1\t0.5\n2\t0.7\n")
    df = read_traits(fname)
    assert list(df.index) == ['1', '2']
    df = read_traits(fname, name_column='id')
    assert list(df['mass']) == [0.5, 0.7]
    with pytest.raises(MissingDataError):
        read_traits(fname, name_column='taxon')
    with pytest.raises(MissingDataError):
        read_traits(str(tmp_path/'missing.csv'))


def test_write_traits(tmp_path):
    import pandas as pd
    from phylostats.io import read_traits, write_traits
    df = pd.DataFrame({'x':[1.0, 2.0]}, index=['a', 'b'])
    fname = str(tmp_path/'out.csv')
    write_traits(df, fname)
    df2 = read_traits(fname)
    assert df2.index.name == 'name'
    assert list(df2['x']) == [1.0, 2.0]

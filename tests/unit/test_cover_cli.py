import pytest

from tools.cover_cli import main

SCENE = """
grid_size: 50
tokens:
  - {id: fighter, x: 25, y: 25}
  - {id: ogre, x: 225, y: 25, size: large}
  - {id: goblin, x: 475, y: 25}
  - {id: archer, x: 25, y: 475}
walls:
  - {id: long, c: [300, 300, 300, 700]}
"""


@pytest.fixture
def scene_file(tmp_path):
    path = tmp_path / 'scene.yaml'
    path.write_text(SCENE, encoding='utf-8')
    return str(path)


def test_attacker_target(scene_file, capsys):
    assert main([scene_file, '--attacker', 'fighter', '--target', 'goblin', '--mode', 'size_differential']) == 0
    out = capsys.readouterr().out
    assert 'fighter -> goblin: lesser' in out
    assert 'AC +1' in out


def test_explain_output(scene_file, capsys):
    main([scene_file, '--attacker', 'fighter', '--target', 'goblin', '--mode', 'size_differential', '--explain'])
    out = capsys.readouterr().out
    assert 'mode: size_differential' in out
    assert 'blockers: ogre' in out


def test_template_from_origin(scene_file, capsys):
    main([scene_file, '--origin', '25,475', '--radius', '700', '--mode', 'size_differential'])
    out = capsys.readouterr().out
    assert 'goblin:' in out
    assert 'archer: none' in out


def test_missing_arguments_exit(scene_file):
    with pytest.raises(SystemExit):
        main([scene_file])
    with pytest.raises(SystemExit):
        main([scene_file, '--attacker', 'fighter', '--target', 'nobody'])

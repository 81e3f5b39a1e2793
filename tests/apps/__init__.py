from pathlib import Path


CONTENT = b'Where Alph, the sacred river, ran\n'
FIXTURE_PATH = Path(__file__).parent.parent / 'fixtures' / 'kubla.txt'

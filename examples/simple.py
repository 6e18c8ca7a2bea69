import sys

from songsheet import parse, to_nashville, transpose

text = """SWEET HOLLOW - TRAD (100 BPM, G key)

G          C
Down in the hollow
D          G
Where the river bends

CHORUS:
C          G
Sing it sweet and low

SOLO: (D G D A)*2
"""
song = parse(text)

# Performance order
for entry in song.structure:
    sys.stdout.write(f"{entry.section_type} #{entry.section_index}\n")

# Chords above their lyric characters
for line in song.sections["verse"].lines:
    sys.stdout.write(" ".join(f"{c.name}@{c.column}" for c in line.chords) + f"  {line.lyrics}\n")

# Up a whole step, then as Nashville numbers
sys.stdout.write(" ".join(c.name for c in transpose(song, 2).sections["verse"].chords) + "\n")  # A D E A
sys.stdout.write(" ".join(c.name for c in to_nashville(song, "G").sections["verse"].chords) + "\n")  # 1 4 5 1

"""
Constants for the face resource container and the Mii database.
"""

# Database file (CFL_DB.dat)
DATABASE_SIZE = 0x4BD20

# CRC16 ranges: [begin, end) of checksummed bytes, the big-endian CRC follows at `end`
CRC_A_RANGE = (0x0000, 0xC81E)
CRC_B_RANGE = (0xC820, 0xE4BE)

# Resource container (CFL_Res.dat)
RESOURCE_PATH = ['CFL_Res.dat']
SECTION_COUNT = 20
MODEL_SECTIONS = range(0, 9)

ITEM_OFFSET_MASK = 0x3FFFFF
REDIRECT_SHIFT = 22
MAX_REDIRECT = 0x3FF

FACE_CONFIG_SECTION = 2
HAIR_SECTION = 5
HAIR_MODEL_SKIP = 0x48
FACE_CANVAS_SECTION = 6

# Leftover bytes after an item must stay below this
TRAILING_TOLERANCE = 4

TEXTURE_TAG = 0x01
INDEX_LIST_TAG = b'\x04\x00'

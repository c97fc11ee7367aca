"""Bundled catalog identifiers used whenever the live listings are unavailable.

Every id is a long-lived base game with a large review count, so a round can
still be played while the Steam store is degraded.
"""

FEATURED_FALLBACK_IDS: tuple[int, ...] = (
    1245620,  # ELDEN RING
    1086940,  # Baldur's Gate 3
    1091500,  # Cyberpunk 2077
    1174180,  # Red Dead Redemption 2
    271590,   # Grand Theft Auto V
    1623730,  # Palworld
    2358720,  # Black Myth: Wukong
    2379780,  # Balatro
    1145360,  # Hades
    413150,   # Stardew Valley
    892970,   # Valheim
    1966720,  # Lethal Company
    1794680,  # Vampire Survivors
    2050650,  # Resident Evil 4
    1593500,  # God of War
    1551360,  # Forza Horizon 5
    292030,   # The Witcher 3: Wild Hunt
    105600,   # Terraria
    548430,   # Deep Rock Galactic
    1426210,  # It Takes Two
)

FULL_FALLBACK_IDS: tuple[int, ...] = (
    220,      # Half-Life 2
    400,      # Portal
    440,      # Team Fortress 2
    550,      # Left 4 Dead 2
    570,      # Dota 2
    620,      # Portal 2
    730,      # Counter-Strike 2
    4000,     # Garry's Mod
    8930,     # Sid Meier's Civilization V
    218620,   # PAYDAY 2
    227300,   # Euro Truck Simulator 2
    230410,   # Warframe
    238960,   # Path of Exile
    244850,   # Space Engineers
    250900,   # The Binding of Isaac: Rebirth
    252490,   # Rust
    252950,   # Rocket League
    255710,   # Cities: Skylines
    264710,   # Subnautica
    268910,   # Cuphead
    275850,   # No Man's Sky
    289070,   # Sid Meier's Civilization VI
    294100,   # RimWorld
    322330,   # Don't Starve Together
    346110,   # ARK: Survival Evolved
    359550,   # Tom Clancy's Rainbow Six Siege
    367520,   # Hollow Knight
    374320,   # DARK SOULS III
    377160,   # Fallout 4
    381210,   # Dead by Daylight
    391540,   # Undertale
    427520,   # Factorio
    435150,   # Divinity: Original Sin 2
    489830,   # The Elder Scrolls V: Skyrim Special Edition
    504230,   # Celeste
    578080,   # PUBG: BATTLEGROUNDS
    582010,   # Monster Hunter: World
    588650,   # Dead Cells
    601150,   # Devil May Cry 5
    632470,   # Disco Elysium
    646570,   # Slay the Spire
    753640,   # Outer Wilds
    814380,   # Sekiro: Shadows Die Twice
    883710,   # Resident Evil 2
    945360,   # Among Us
    1085660,  # Destiny 2
    1172470,  # Apex Legends
) + FEATURED_FALLBACK_IDS

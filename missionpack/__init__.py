"""missionpack: parse, render and merge daily mission pack markdown."""

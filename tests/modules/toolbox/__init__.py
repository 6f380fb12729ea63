name = "toolbox"

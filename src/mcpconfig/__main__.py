from mcpconfig.main import main

main()

from trello_cli.mcp_server import main

main()

from github_mcp_wrapper.app import main

main()

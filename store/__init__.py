"""Google Sheets record store: schema, repositories, tally and submission validation"""
